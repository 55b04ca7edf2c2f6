from rules_audit.core.utils.logging import swallow_errors


class Recorder:
    def __init__(self):
        self.calls = 0

    @swallow_errors("recorder_wrap", fallback=lambda self, value: value)
    def wrap(self, value):
        self.calls += 1
        if value == "explode":
            raise RuntimeError("boom")
        return f"wrapped {value}"


class TestSwallowErrors:
    def test_passes_through_return_value(self):
        assert Recorder().wrap("ok") == "wrapped ok"

    def test_failure_returns_fallback(self, caplog):
        recorder = Recorder()

        assert recorder.wrap("explode") == "explode"
        assert recorder.calls == 1
        assert "recorder_wrap failed" in caplog.text

    def test_failure_without_fallback_returns_none(self):
        @swallow_errors()
        def broken():
            raise ValueError("nope")

        assert broken() is None

    def test_keeps_function_metadata(self):
        @swallow_errors()
        def documented():
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."
