from vocab_api.shared.logger import AsyncLogEmitter


def test_emitter_drains_queue_on_shutdown():
    emitter = AsyncLogEmitter()
    emitter.emit("first line\n")
    emitter.emit("second line\n")

    emitter.shutdown()
    emitter.thread.join(timeout=2)

    assert emitter.queue.empty()
    assert not emitter.thread.is_alive()
