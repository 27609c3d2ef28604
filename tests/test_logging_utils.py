"""Tests for the structured progress logger."""

import logging
from typing import Optional, get_type_hints


class TestEntityLogger:
    """Tests for EntityLogger."""

    def test_records_carry_structured_fields(self, caplog):
        """Test kind, count and entity_id extras on each record."""
        from dualseed.utils.logging_utils import EntityLogger

        with caplog.at_level(logging.INFO, logger="dualseed"):
            EntityLogger().inserted("product", 12)

        record = caplog.records[-1]
        assert record.kind == "product"
        assert record.count == 12
        assert record.entity_id is None

    def test_warning_without_kind(self, caplog):
        """Test that kind may be left out."""
        from dualseed.utils.logging_utils import EntityLogger

        with caplog.at_level(logging.WARNING, logger="dualseed"):
            EntityLogger().warning("stores disagree")

        assert caplog.records[-1].kind is None
        assert caplog.records[-1].levelno == logging.WARNING

    def test_optional_parameters_are_annotated(self):
        """Test that parameters defaulting to None are typed Optional."""
        from dualseed.utils.logging_utils import EntityLogger

        hints = get_type_hints(EntityLogger._log)
        assert hints["kind"] == Optional[str]
        assert hints["count"] == Optional[int]
        assert hints["entity_id"] == Optional[str]
        assert get_type_hints(EntityLogger.warning)["kind"] == Optional[str]
