"""Unit tests for SendTaxDocument use case"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.tax_documents import SendTaxDocument
from src.domain.tax_document import DocumentStatus


@pytest.fixture
def mock_gateway():
    gateway = MagicMock()
    gateway.submit = AsyncMock(return_value="DEMO-0123456789abc")
    return gateway


@pytest.fixture
def use_case(mock_uow, mock_document_repo, mock_gateway):
    return SendTaxDocument(mock_uow, mock_document_repo, mock_gateway)


@pytest.mark.asyncio
class TestSendTaxDocument:

    async def test_sends_draft(
        self, use_case, mock_uow, mock_document_repo, mock_gateway, make_document, sample_items
    ):
        document = make_document()
        sent = make_document(status=DocumentStatus.SENT, external_tracking_id="DEMO-0123456789abc")
        mock_document_repo.get_by_id = AsyncMock(return_value=document)
        mock_document_repo.mark_sent = AsyncMock(return_value=sent)
        mock_document_repo.get_items = AsyncMock(return_value=sample_items)

        result = await use_case.execute(1, "tenant_a")

        assert result.is_ok()
        assert result.value.status == DocumentStatus.SENT
        assert result.value.external_tracking_id == "DEMO-0123456789abc"
        mock_gateway.submit.assert_awaited_once_with(document)
        mock_document_repo.mark_sent.assert_awaited_once_with(document, "tenant_a", "DEMO-0123456789abc")
        mock_uow.commit.assert_awaited_once()

    async def test_already_sent(self, use_case, mock_uow, mock_document_repo, mock_gateway, make_document):
        mock_document_repo.get_by_id = AsyncMock(return_value=make_document(status=DocumentStatus.SENT))

        result = await use_case.execute(1, "tenant_a")

        assert result.is_err()
        assert result.error.code == "INVALID_DOCUMENT_STATUS"
        mock_gateway.submit.assert_not_called()
        mock_uow.commit.assert_not_awaited()

    async def test_gateway_failure_rolls_back(
        self, use_case, mock_uow, mock_document_repo, mock_gateway, make_document
    ):
        mock_document_repo.get_by_id = AsyncMock(return_value=make_document())
        mock_document_repo.mark_sent = AsyncMock()
        mock_gateway.submit = AsyncMock(side_effect=ConnectionError("authority unreachable"))

        result = await use_case.execute(1, "tenant_a")

        assert result.is_err()
        assert result.error.code == "PERSISTENCE_ERROR"
        mock_document_repo.mark_sent.assert_not_called()
        mock_uow.rollback.assert_awaited_once()

    async def test_other_tenant_is_forbidden(self, use_case, mock_document_repo, mock_gateway, make_document):
        mock_document_repo.get_by_id = AsyncMock(return_value=make_document(tenant_id="tenant_b"))

        result = await use_case.execute(1, "tenant_a")

        assert result.error.code == "FORBIDDEN"
        mock_gateway.submit.assert_not_called()

    async def test_status_error_built_before_rollback_expires_document(
        self, use_case, mock_uow, mock_document_repo, mock_gateway, make_document
    ):
        document = make_document(status=DocumentStatus.ACCEPTED)
        mock_document_repo.get_by_id = AsyncMock(return_value=document)
        mock_uow.rollback = AsyncMock(side_effect=lambda: setattr(document, "status", None))

        result = await use_case.execute(1, "tenant_a")

        assert result.error.code == "INVALID_DOCUMENT_STATUS"
        assert "accepted" in result.error.message
        mock_gateway.submit.assert_not_called()
