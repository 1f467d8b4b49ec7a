"""Tests for ResultStore and the settings/result schemas."""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from src.embedding.lifecycle import LOAD_ERROR_MESSAGE, ModelStatus
from src.sentiment.schemas import SentimentResult, WidgetSettings
from src.sentiment.store import ResultStore

POSITIVE = SentimentResult("positive", 0.375, 0.375)
NEGATIVE = SentimentResult("negative", 1.0, -1.0)


class TestSentimentResult:
    def test_rejects_unknown_label(self):
        with pytest.raises(ValueError):
            SentimentResult("happy", 0.5, 0.5)  # type: ignore[arg-type]

    @pytest.mark.parametrize("confidence", [-0.01, 1.01])
    def test_rejects_confidence_out_of_range(self, confidence):
        with pytest.raises(ValueError):
            SentimentResult("neutral", confidence, 0.0)

    def test_rejects_score_out_of_range(self):
        with pytest.raises(ValueError):
            SentimentResult("positive", 1.0, 1.5)

    def test_to_dict(self):
        assert POSITIVE.to_dict() == {"sentiment": "positive", "confidence": 0.375, "score": 0.375}


class TestWidgetSettings:
    def test_defaults(self):
        settings = WidgetSettings()

        assert settings.threshold == 0.5
        assert settings.show_confidence is True
        assert settings.real_time is True

    @pytest.mark.parametrize("threshold", [0.05, 0.95])
    def test_threshold_range(self, threshold):
        with pytest.raises(ValidationError):
            WidgetSettings(threshold=threshold)


class TestResultStore:
    """Tests for result application and flags."""

    def test_initial_state(self):
        store = ResultStore()

        assert store.result is None
        assert store.is_loading is False
        assert store.error is None
        assert store.applied_generation == 0

    def test_apply_notifies_once(self):
        callback = MagicMock()
        store = ResultStore(on_sentiment_detected=callback)

        assert store.apply(1, POSITIVE) is True

        assert store.result == POSITIVE
        callback.assert_called_once_with(POSITIVE)

    def test_older_generation_never_overwrites_newer(self):
        callback = MagicMock()
        store = ResultStore(on_sentiment_detected=callback)
        store.apply(3, NEGATIVE)

        assert store.apply(2, POSITIVE) is False
        assert store.apply(3, POSITIVE) is False

        assert store.result == NEGATIVE
        callback.assert_called_once_with(NEGATIVE)

    def test_callback_failure_does_not_block_apply(self):
        store = ResultStore(on_sentiment_detected=MagicMock(side_effect=RuntimeError("ui gone")))

        assert store.apply(1, POSITIVE) is True
        assert store.result == POSITIVE

    def test_update_settings_validates(self):
        store = ResultStore()
        store.update_settings(threshold=0.7, real_time=False)

        with pytest.raises(ValidationError):
            store.update_settings(threshold=2.0)

        assert store.settings.threshold == 0.7
        assert store.settings.real_time is False

    def test_update_settings_rejects_unknown_key(self):
        store = ResultStore()

        with pytest.raises(ValidationError):
            store.update_settings(realTime=False)

        assert store.settings == WidgetSettings()

    def test_sync_model_status(self):
        store = ResultStore()

        store.sync_model_status(ModelStatus.LOADING)
        assert store.is_loading is True
        assert store.error is None

        store.sync_model_status(ModelStatus.ERROR, LOAD_ERROR_MESSAGE)
        assert store.is_loading is False
        assert store.error == LOAD_ERROR_MESSAGE

        store.sync_model_status(ModelStatus.UNLOADED, LOAD_ERROR_MESSAGE)
        assert store.error is None

    def test_clear_and_reset_generation(self):
        store = ResultStore()
        store.apply(5, POSITIVE)

        store.reset_generation()
        assert store.apply(1, NEGATIVE) is True

        store.clear()
        assert store.result is None
        assert store.applied_generation == 0

    def test_snapshot(self):
        store = ResultStore()
        store.apply(1, POSITIVE)

        snapshot = store.snapshot()

        assert snapshot["result"] == POSITIVE.to_dict()
        assert snapshot["settings"]["real_time"] is True
        assert snapshot["is_loading"] is False
        assert snapshot["error"] is None
