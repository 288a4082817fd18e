"""
Unit tests for the design analysis service.
"""

from unittest.mock import patch

import pytest

from design_gate.core.exceptions import (
    AdmissionRejectedError,
    InputShapeError,
    ValidationError,
)
from design_gate.core.optimization.print_optimizer import (
    HIGH_RESOLUTION_MESSAGE,
    ROTATION_MESSAGE,
)
from design_gate.models.design import DesignCategory, DesignFile
from design_gate.services.analysis_service import DesignAnalysisService


@pytest.fixture
def service(history, classifier):
    return DesignAnalysisService(history=history, classifier=classifier)


class TestAnalyze:
    """Test single-file analysis."""

    def test_analyze_returns_report(self, service):
        report = service.analyze("poster.pdf", "application/pdf", "/uploads/1")

        assert report.classification.category == DesignCategory.POSTER
        assert report.optimization.recommendations == (ROTATION_MESSAGE,)

    def test_unsupported_mimetype_still_classified(self, service):
        with patch("design_gate.services.analysis_service.logger") as mock_logger:
            report = service.analyze("brochure.docx", "application/msword")

        assert report.classification.category == DesignCategory.BROCHURE
        assert report.optimization.recommendations == (
            ROTATION_MESSAGE,
            HIGH_RESOLUTION_MESSAGE,
        )
        mock_logger.warning.assert_called_once()

    def test_supported_mimetype_no_warning(self, service):
        with patch("design_gate.services.analysis_service.logger") as mock_logger:
            service.analyze("logo.png", "image/png")
        mock_logger.warning.assert_not_called()

    def test_empty_supported_list_is_kept(self, history):
        service = DesignAnalysisService(history=history, supported_mime_types=[])
        assert service.supported_mime_types == set()

        with patch("design_gate.services.analysis_service.logger") as mock_logger:
            service.analyze("logo.png", "image/png")
        mock_logger.warning.assert_called_once()

    def test_configured_list_replaces_defaults(self, history):
        service = DesignAnalysisService(
            history=history, supported_mime_types=["Image/GIF"]
        )
        assert service.supported_mime_types == {"image/gif"}

        with patch("design_gate.services.analysis_service.logger") as mock_logger:
            service.analyze("logo.gif", "image/gif")
            mock_logger.warning.assert_not_called()
            service.analyze("logo.pdf", "application/pdf")
            mock_logger.warning.assert_called_once()

    def test_default_list_when_not_configured(self, history):
        service = DesignAnalysisService(history=history)
        assert "application/pdf" in service.supported_mime_types


class TestAnalyzeBatch:
    """Test multi-file analysis and admission."""

    @pytest.mark.asyncio
    async def test_batch_reports_in_order(self, service):
        files = [
            DesignFile(name="label.png", mime_type="image/png"),
            {"name": "kartvizit.pdf", "mimeType": "application/pdf"},
        ]

        reports = await service.analyze_batch(files)

        assert [r.classification.category for r in reports] == [
            DesignCategory.LABEL,
            DesignCategory.BUSINESS_CARD,
        ]

    @pytest.mark.asyncio
    async def test_empty_batch(self, service):
        assert await service.analyze_batch([]) == []

    @pytest.mark.asyncio
    async def test_batch_size_limit(self, history):
        service = DesignAnalysisService(history=history, max_batch_size=2)
        files = [DesignFile(name=f"{i}.png", mime_type="image/png") for i in range(3)]

        with pytest.raises(ValidationError) as exc_info:
            await service.analyze_batch(files)
        assert exc_info.value.details["field_value"] == 3

    @pytest.mark.asyncio
    async def test_malformed_element(self, service):
        with pytest.raises(InputShapeError):
            await service.analyze_batch([{"name": "logo.png"}])

    @pytest.mark.asyncio
    async def test_unhealthy_batch_allowed_without_enforcement(
        self, service, history, make_snapshot
    ):
        history.record(make_snapshot(active_connections=5000))

        assert service.is_accepting_work() is False
        reports = await service.analyze_batch(
            [DesignFile(name="logo.png", mime_type="image/png")]
        )
        assert len(reports) == 1

    @pytest.mark.asyncio
    async def test_enforced_admission_rejects(self, history, make_snapshot):
        service = DesignAnalysisService(history=history, enforce_admission=True)
        history.record(make_snapshot(heap_used_mb=6500, active_connections=12))

        with pytest.raises(AdmissionRejectedError) as exc_info:
            await service.analyze_batch(
                [DesignFile(name="logo.png", mime_type="image/png")]
            )

        assert exc_info.value.error_code == "DG004"
        assert exc_info.value.details["active_connections"] == 12
        assert exc_info.value.details["heap_used_mb"] == 6500.0

    @pytest.mark.asyncio
    async def test_enforced_admission_accepts_when_healthy(
        self, history, make_snapshot
    ):
        service = DesignAnalysisService(history=history, enforce_admission=True)
        assert service.is_accepting_work() is True

        history.record(make_snapshot(heap_used_mb=200, active_connections=3))
        reports = await service.analyze_batch(
            [DesignFile(name="poster.svg", mime_type="image/svg+xml")]
        )
        assert reports[0].classification.category == DesignCategory.POSTER
