import asyncio

import pytest

from app.services.upload_queue import RateLimitedUploader, UploadQueueCleared


class RecordingSleep:
    def __init__(self, events):
        self.events = events

    async def __call__(self, seconds):
        self.events.append(("sleep", seconds))


def _uploader(events, delay=5.0):
    return RateLimitedUploader(delay, sleep=RecordingSleep(events))


def test_records_are_processed_in_order_with_pause_between_them():
    events = []
    uploader = _uploader(events)

    async def handler(record):
        events.append(("record", record))
        return {"success": True, "item": record}

    results = asyncio.run(uploader.run(["a", "b", "c"], handler))

    assert [item["item"] for item in results] == ["a", "b", "c"]
    assert [item["index"] for item in results] == [0, 1, 2]
    assert events == [
        ("record", "a"),
        ("sleep", 5.0),
        ("record", "b"),
        ("sleep", 5.0),
        ("record", "c"),
    ]


def test_failing_record_becomes_result_entry_and_processing_continues():
    uploader = _uploader([], delay=0)

    async def handler(record):
        if record["name"] == "bad":
            raise ValueError("boom")
        return {"success": True, "item": record}

    records = [{"name": "ok"}, {"name": "bad"}, {"name": "ok2"}]
    results = asyncio.run(uploader.run(records, handler))

    assert len(results) == 3
    assert results[1] == {"success": False, "error": "boom", "item": {"name": "bad"}, "index": 1}
    assert results[2]["success"] is True


def test_handler_without_return_value_counts_as_success():
    uploader = _uploader([], delay=0)

    async def handler(record):
        return None

    results = asyncio.run(uploader.run([1], handler))
    assert results == [{"success": True, "item": 1, "index": 0}]


def test_non_list_payload_is_rejected():
    uploader = _uploader([])

    async def handler(record):
        return None

    async def scenario():
        with pytest.raises(TypeError):
            uploader.submit({"not": "a list"}, handler)

    asyncio.run(scenario())
    assert uploader.status()["queue_length"] == 0


def test_jobs_run_one_after_another_with_single_pause_between_jobs():
    events = []
    uploader = _uploader(events, delay=1.0)

    def handler_for(label):
        async def handler(record):
            events.append((label, record))
            return {"success": True}

        return handler

    async def scenario():
        first = asyncio.ensure_future(uploader.run([1, 2], handler_for("first")))
        second = asyncio.ensure_future(uploader.run([3], handler_for("second")))
        await asyncio.sleep(0)
        assert uploader.status()["is_processing"] is True
        return await asyncio.gather(first, second)

    first_results, second_results = asyncio.run(scenario())

    assert len(first_results) == 2
    assert len(second_results) == 1
    assert events == [
        ("first", 1),
        ("sleep", 1.0),
        ("first", 2),
        ("sleep", 1.0),
        ("second", 3),
    ]
    assert uploader.status() == {"queue_length": 0, "is_processing": False, "rate_limit_delay": 1.0}


def test_progress_callback_reports_each_record():
    uploader = _uploader([], delay=0)
    seen = []

    async def handler(record):
        return {"success": True}

    asyncio.run(uploader.run(["a", "b"], handler, on_progress=lambda *args: seen.append(args)))
    assert seen == [(50, 1, 2), (100, 2, 2)]


def test_clear_drops_queued_jobs_but_not_the_running_one():
    uploader = _uploader([], delay=0)
    gate = None

    async def slow_handler(record):
        await gate.wait()
        return {"success": True}

    async def scenario():
        nonlocal gate
        gate = asyncio.Event()
        running = asyncio.ensure_future(uploader.run(["x"], slow_handler, kind="rooms"))
        await asyncio.sleep(0)
        waiting = asyncio.ensure_future(uploader.run(["y"], slow_handler, kind="rooms"))
        await asyncio.sleep(0)
        assert uploader.status()["queue_length"] == 1

        assert uploader.clear() == 1
        gate.set()
        with pytest.raises(UploadQueueCleared):
            await waiting
        return await running

    results = asyncio.run(scenario())
    assert results[0]["success"] is True


def test_job_summary_tracks_counts():
    uploader = _uploader([], delay=0)

    async def handler(record):
        return {"success": record != "bad"}

    async def scenario():
        done = asyncio.get_running_loop().create_future()
        job_id = uploader.submit(["ok", "bad"], handler, kind="teachers", on_complete=done.set_result)
        await done
        return uploader.get_job(job_id).summary()

    summary = asyncio.run(scenario())
    assert summary["status"] == "completed"
    assert summary["successful"] == 1
    assert summary["failed"] == 1
    assert summary["progress"] == 100


def test_raising_progress_observer_does_not_stop_the_batch():
    uploader = _uploader([], delay=0)
    seen = []

    async def handler(record):
        seen.append(record)
        return {"success": True, "item": record}

    def broken_observer(progress, completed, total):
        raise RuntimeError("observer broke")

    results = asyncio.run(uploader.run(["a", "b", "c"], handler, on_progress=broken_observer))

    assert seen == ["a", "b", "c"]
    assert [item["success"] for item in results] == [True, True, True]


def test_enqueued_job_outlives_registry_eviction(monkeypatch):
    from app.services import upload_queue

    monkeypatch.setattr(upload_queue, "MAX_TRACKED_JOBS", 1)
    uploader = _uploader([], delay=0)

    async def handler(record):
        return {"success": True, "item": record}

    async def scenario():
        first = uploader.enqueue(["a"], handler)
        second = uploader.enqueue(["b", "c"], handler)
        await uploader.run([], handler)
        return first, second

    first, second = asyncio.run(scenario())

    assert uploader.get_job(first.id) is None
    assert first.status == "completed"
    assert first.summary()["results"][0]["item"] == "a"
    assert second.summary()["successful"] == 2
