from types import SimpleNamespace

from storefront import crud, models, seed, tasks


def test_seed_catalog_replaces_existing(db, make_product):
    make_product(id="old", slug="old-thing")
    steps = []

    counts = seed.seed_catalog(db, progress=lambda pct, status: steps.append(status))

    assert counts == {"categories": 4, "products": 6}
    assert crud.get_product(db, "old") is None
    assert crud.get_product_by_slug(db, "wireless-headphones").stock == 50
    assert [c.name for c in crud.get_categories(db)][0] == "Clothing"
    assert steps == ["clearing_catalog", "adding_categories", "adding_products"]


def test_seed_task_reports_progress(db, fake_redis, session_factory, monkeypatch):
    monkeypatch.setattr(tasks, "SessionLocal", session_factory)

    result = tasks.seed_catalog_task.apply()

    assert result.successful()
    assert result.result["products"] == 6
    progress = tasks.get_progress(result.id)
    assert progress["status"] == "done"
    assert progress["percent"] == 100
    assert fake_redis.ttl(tasks.progress_key(result.id)) > 0
    assert db.query(models.Product).count() == 6


def test_seed_task_records_error(db, fake_redis, session_factory, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("db went away")

    monkeypatch.setattr(tasks, "SessionLocal", session_factory)
    monkeypatch.setattr(seed, "seed_catalog", broken)

    result = tasks.seed_catalog_task.apply()

    assert result.failed()
    progress = tasks.get_progress(result.id)
    assert progress["status"] == "error"
    assert progress["meta"]["detail"] == "db went away"


def test_seed_endpoint_enqueues(client, monkeypatch):
    sent = []

    def fake_apply_async(**kwargs):
        sent.append(kwargs)
        return SimpleNamespace(id="task-1")

    monkeypatch.setattr(tasks.seed_catalog_task, "apply_async", fake_apply_async)
    res = client.post("/api/seed")
    assert res.status_code == 202
    assert res.json() == {"task_id": "task-1"}
    assert sent == [{"kwargs": {"reset": True}}]


def test_progress_stream_ends_when_done(client, fake_redis):
    tasks.set_progress("task-1", 100, "done", {"products": 6})

    res = client.get("/sse/progress/task-1")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/event-stream")
    assert '"status": "done"' in res.text
