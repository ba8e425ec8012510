"""Integration tests for the tax document lifecycle with a real database

Tests cover:
- Create: header, items and number committed together
- Atomicity: a failure while inserting items leaves nothing behind
- Large amounts stored without precision loss
- Update: drafts replaced and recomputed; sent documents stay unchanged
- Delete: drafts removed with their items; sent documents rejected
- Send: draft -> sent with a tracking id
- Tenant isolation and list/stats
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import func
from sqlmodel import select
from src.adapter.repositories.tax_document_repository import SqlAlchemyTaxDocumentRepository
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.services.numbering_service import SqlAlchemyDocumentNumberingService
from src.adapter.services.tax_authority_gateway import StubTaxAuthorityGateway
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.tax_documents import (
    CreateTaxDocument,
    CreateTaxDocumentCommandDTO,
    DeleteTaxDocument,
    GetTaxDocument,
    ListTaxDocuments,
    ListTaxDocumentsQueryDTO,
    SendTaxDocument,
    TaxDocumentItemCommandDTO,
    UpdateTaxDocument,
    UpdateTaxDocumentCommandDTO,
)
from src.domain.document_sequence import DocumentSequence
from src.domain.tax_document import MAX_SEQUENCE, DocumentStatus, DocumentType, TaxDocument
from src.domain.tax_document_item import TaxDocumentItem


class FailingItemsRepository(SqlAlchemyTaxDocumentRepository):
    """Fails after the header has been flushed"""

    async def _insert_items(self, document_id, items, descriptions):
        await super()._insert_items(document_id, items[:1], descriptions[:1])
        raise RuntimeError("item insert failed")


def create_command(products, tenant_id="tenant_a", document_type=DocumentType.INVOICE, **overrides):
    values = dict(
        tenant_id=tenant_id,
        customer_id=12,
        document_type=document_type,
        issue_date=date(2024, 3, 1),
        due_date=date(2024, 3, 31),
        items=[
            TaxDocumentItemCommandDTO(product_id=products["widget"], quantity=Decimal("2"), unit_price=Decimal("1000")),
            TaxDocumentItemCommandDTO(product_id=products["setup"], quantity=Decimal("1"), unit_price=Decimal("500")),
        ],
    )
    values.update(overrides)
    return CreateTaxDocumentCommandDTO(**values)


async def count_rows(session, model):
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def create_document(session, build_repo, products, **kwargs):
    result = await CreateTaxDocument(SqlAlchemyUnitOfWork(session), build_repo(session)).execute(
        create_command(products, **kwargs)
    )
    assert result.is_ok(), result.error
    return result.value


@pytest.mark.asyncio
class TestCreateTaxDocument:

    async def test_create_invoice(self, db_session, build_repo, products):
        document = await create_document(db_session, build_repo, products)

        assert document.number == "F-00000001"
        assert document.status == DocumentStatus.DRAFT
        assert document.subtotal == Decimal("2500")
        assert document.tax_amount == Decimal("475.00")
        assert document.total == Decimal("2975.00")
        assert [item.description for item in document.items] == ["Widget", "Setup fee"]
        assert [item.position for item in document.items] == [0, 1]

        second = await create_document(db_session, build_repo, products)
        assert second.number == "F-00000002"

    async def test_description_override(self, db_session, build_repo, products):
        document = await create_document(
            db_session,
            build_repo,
            products,
            items=[
                TaxDocumentItemCommandDTO(
                    product_id=products["widget"],
                    quantity=Decimal("1"),
                    unit_price=Decimal("10"),
                    description="Custom widget",
                )
            ],
        )

        assert document.items[0].description == "Custom widget"

    async def test_product_of_other_tenant_rejected(self, db_session, build_repo, products):
        use_case = CreateTaxDocument(SqlAlchemyUnitOfWork(db_session), build_repo(db_session))

        result = await use_case.execute(
            create_command(
                products,
                items=[TaxDocumentItemCommandDTO(product_id=products["gadget"], quantity=Decimal("1"), unit_price=Decimal("10"))],
            )
        )

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert await count_rows(db_session, TaxDocument) == 0

    async def test_failure_during_items_leaves_nothing(self, session_factory, build_repo, products):
        """
        Given: Item insert fails after the header and number were written
        When: create runs
        Then: no document, no items, and the number is not consumed
        """
        async with session_factory() as session:
            repo = FailingItemsRepository(
                session,
                numbering_service=SqlAlchemyDocumentNumberingService(session),
                product_repo=SqlAlchemyProductRepository(session),
            )
            result = await CreateTaxDocument(SqlAlchemyUnitOfWork(session), repo).execute(
                create_command(products)
            )

            assert result.is_err()
            assert result.error.code == "PERSISTENCE_ERROR"

        async with session_factory() as session:
            assert await count_rows(session, TaxDocument) == 0
            assert await count_rows(session, TaxDocumentItem) == 0

            document = await create_document(session, build_repo, products)
            assert document.number == "F-00000001"

    async def test_large_amounts_stored_exactly(self, session_factory, build_repo, products):
        quantity, unit_price = Decimal("1234.5678"), Decimal("98765.43")
        async with session_factory() as session:
            created = await create_document(
                session,
                build_repo,
                products,
                items=[TaxDocumentItemCommandDTO(product_id=products["widget"], quantity=quantity, unit_price=unit_price)],
            )

        async with session_factory() as session:
            reloaded = (await GetTaxDocument(build_repo(session)).execute(created.document_id, "tenant_a")).value

        assert reloaded.subtotal == quantity * unit_price
        assert reloaded.items[0].line_total == quantity * unit_price
        assert reloaded.total == reloaded.subtotal + reloaded.tax_amount
        assert reloaded.created_at.tzinfo is None

    async def test_exhausted_sequence_creates_nothing(self, session_factory, build_repo, products):
        async with session_factory() as session:
            session.add(DocumentSequence(tenant_id="tenant_a", document_type="invoice", current_value=MAX_SEQUENCE))
            await session.commit()

        async with session_factory() as session:
            result = await CreateTaxDocument(SqlAlchemyUnitOfWork(session), build_repo(session)).execute(
                create_command(products)
            )

            assert result.is_err()
            assert result.error.code == "SEQUENCE_EXHAUSTED"

        async with session_factory() as session:
            assert await count_rows(session, TaxDocument) == 0
            assert await count_rows(session, TaxDocumentItem) == 0


@pytest.mark.asyncio
class TestUpdateTaxDocument:

    async def test_update_draft_replaces_items(self, db_session, build_repo, products):
        created = await create_document(db_session, build_repo, products)

        use_case = UpdateTaxDocument(SqlAlchemyUnitOfWork(db_session), build_repo(db_session))
        result = await use_case.execute(
            UpdateTaxDocumentCommandDTO(
                document_id=created.document_id,
                tenant_id="tenant_a",
                customer_id=99,
                issue_date=date(2024, 3, 2),
                due_date=date(2024, 4, 1),
                items=[TaxDocumentItemCommandDTO(product_id=products["setup"], quantity=Decimal("3"), unit_price=Decimal("100"))],
            )
        )

        assert result.is_ok(), result.error
        updated = result.value
        assert updated.number == created.number
        assert updated.customer_id == 99
        assert updated.subtotal == Decimal("300")
        assert updated.tax_amount == Decimal("57.00")
        assert updated.total == Decimal("357.00")
        assert len(updated.items) == 1
        assert await count_rows(db_session, TaxDocumentItem) == 1

    async def test_update_sent_document_leaves_it_unchanged(self, session_factory, build_repo, products):
        async with session_factory() as session:
            created = await create_document(session, build_repo, products)
            sent = await SendTaxDocument(
                SqlAlchemyUnitOfWork(session), build_repo(session), StubTaxAuthorityGateway()
            ).execute(created.document_id, "tenant_a")
            assert sent.is_ok()

        async with session_factory() as session:
            result = await UpdateTaxDocument(SqlAlchemyUnitOfWork(session), build_repo(session)).execute(
                UpdateTaxDocumentCommandDTO(
                    document_id=created.document_id,
                    tenant_id="tenant_a",
                    issue_date=date(2024, 3, 1),
                    due_date=date(2024, 3, 31),
                    items=[TaxDocumentItemCommandDTO(product_id=products["widget"], quantity=Decimal("1"), unit_price=Decimal("1"))],
                )
            )

            assert result.is_err()
            assert result.error.code == "INVALID_DOCUMENT_STATUS"

        async with session_factory() as session:
            reloaded = await GetTaxDocument(build_repo(session)).execute(created.document_id, "tenant_a")
            assert reloaded.value.status == DocumentStatus.SENT
            assert reloaded.value.total == Decimal("2975.00")
            assert len(reloaded.value.items) == 2


@pytest.mark.asyncio
class TestDeleteTaxDocument:

    async def test_delete_draft_removes_items(self, db_session, build_repo, products):
        created = await create_document(db_session, build_repo, products)

        result = await DeleteTaxDocument(SqlAlchemyUnitOfWork(db_session), build_repo(db_session)).execute(
            created.document_id, "tenant_a"
        )

        assert result.is_ok()
        assert await count_rows(db_session, TaxDocument) == 0
        assert await count_rows(db_session, TaxDocumentItem) == 0

    async def test_delete_sent_rejected(self, db_session, build_repo, products):
        created = await create_document(db_session, build_repo, products)
        await SendTaxDocument(
            SqlAlchemyUnitOfWork(db_session), build_repo(db_session), StubTaxAuthorityGateway()
        ).execute(created.document_id, "tenant_a")

        result = await DeleteTaxDocument(SqlAlchemyUnitOfWork(db_session), build_repo(db_session)).execute(
            created.document_id, "tenant_a"
        )

        assert result.is_err()
        assert result.error.code == "INVALID_DOCUMENT_STATUS"
        assert await count_rows(db_session, TaxDocument) == 1
        assert await count_rows(db_session, TaxDocumentItem) == 2

    async def test_delete_by_other_tenant_forbidden(self, db_session, build_repo, products):
        created = await create_document(db_session, build_repo, products)

        result = await DeleteTaxDocument(SqlAlchemyUnitOfWork(db_session), build_repo(db_session)).execute(
            created.document_id, "tenant_b"
        )

        assert result.error.code == "FORBIDDEN"
        assert await count_rows(db_session, TaxDocument) == 1

    async def test_delete_sent_in_new_session_rejected(self, session_factory, build_repo, products):
        async with session_factory() as session:
            created = await create_document(session, build_repo, products)
            await SendTaxDocument(
                SqlAlchemyUnitOfWork(session), build_repo(session), StubTaxAuthorityGateway()
            ).execute(created.document_id, "tenant_a")

        async with session_factory() as session:
            result = await DeleteTaxDocument(SqlAlchemyUnitOfWork(session), build_repo(session)).execute(
                created.document_id, "tenant_a"
            )

            assert result.is_err()
            assert result.error.code == "INVALID_DOCUMENT_STATUS"
            assert "sent" in result.error.message

        async with session_factory() as session:
            assert await count_rows(session, TaxDocument) == 1
            assert await count_rows(session, TaxDocumentItem) == 2


@pytest.mark.asyncio
class TestSendTaxDocument:

    async def test_send_sets_status_and_tracking(self, db_session, build_repo, products):
        created = await create_document(db_session, build_repo, products)

        result = await SendTaxDocument(
            SqlAlchemyUnitOfWork(db_session), build_repo(db_session), StubTaxAuthorityGateway()
        ).execute(created.document_id, "tenant_a")

        assert result.is_ok()
        assert result.value.status == DocumentStatus.SENT
        assert result.value.external_tracking_id.startswith("DEMO-")

        again = await SendTaxDocument(
            SqlAlchemyUnitOfWork(db_session), build_repo(db_session), StubTaxAuthorityGateway()
        ).execute(created.document_id, "tenant_a")
        assert again.error.code == "INVALID_DOCUMENT_STATUS"

    async def test_send_twice_in_new_session_rejected(self, session_factory, build_repo, products):
        async with session_factory() as session:
            created = await create_document(session, build_repo, products)
            first = await SendTaxDocument(
                SqlAlchemyUnitOfWork(session), build_repo(session), StubTaxAuthorityGateway()
            ).execute(created.document_id, "tenant_a")

        async with session_factory() as session:
            again = await SendTaxDocument(
                SqlAlchemyUnitOfWork(session), build_repo(session), StubTaxAuthorityGateway()
            ).execute(created.document_id, "tenant_a")

            assert again.is_err()
            assert again.error.code == "INVALID_DOCUMENT_STATUS"

        async with session_factory() as session:
            reloaded = await GetTaxDocument(build_repo(session)).execute(created.document_id, "tenant_a")
            assert reloaded.value.external_tracking_id == first.value.external_tracking_id


@pytest.mark.asyncio
class TestListTaxDocuments:

    async def test_list_is_tenant_scoped_with_stats(self, db_session, build_repo, products):
        first = await create_document(db_session, build_repo, products)
        await create_document(db_session, build_repo, products)
        await create_document(db_session, build_repo, products, document_type=DocumentType.RECEIPT)
        await create_document(
            db_session,
            build_repo,
            products,
            tenant_id="tenant_b",
            items=[TaxDocumentItemCommandDTO(product_id=products["gadget"], quantity=Decimal("1"), unit_price=Decimal("10"))],
        )

        # accepted, unpaid and past due
        document = await db_session.get(TaxDocument, first.document_id)
        document.status = DocumentStatus.ACCEPTED
        document.due_date = date(2024, 4, 1)
        db_session.add(document)
        await db_session.commit()

        use_case = ListTaxDocuments(build_repo(db_session), today=lambda: date(2024, 5, 1))
        result = await use_case.execute(ListTaxDocumentsQueryDTO(tenant_id="tenant_a"))

        assert result.is_ok()
        response = result.value
        assert response.total_count == 3
        assert [doc.number for doc in response.documents] == ["B-00000001", "F-00000002", "F-00000001"]
        assert response.stats.total_draft == 2
        assert response.stats.total_accepted == 1
        assert response.stats.total_overdue == 1

        filtered = await use_case.execute(
            ListTaxDocumentsQueryDTO(tenant_id="tenant_a", document_type=DocumentType.INVOICE, search="0002")
        )
        assert [doc.number for doc in filtered.value.documents] == ["F-00000002"]

        paged = await use_case.execute(ListTaxDocumentsQueryDTO(tenant_id="tenant_a", limit=1, offset=1))
        assert len(paged.value.documents) == 1
        assert paged.value.total_count == 3

    async def test_paid_document_is_not_overdue(self, db_session, build_repo, products):
        created = await create_document(db_session, build_repo, products)
        document = await db_session.get(TaxDocument, created.document_id)
        document.status = DocumentStatus.ACCEPTED
        document.paid_at = datetime(2024, 3, 15, 12, 0, 0)
        db_session.add(document)
        await db_session.commit()

        result = await ListTaxDocuments(build_repo(db_session), today=lambda: date(2024, 5, 1)).execute(
            ListTaxDocumentsQueryDTO(tenant_id="tenant_a")
        )

        assert result.value.stats.total_accepted == 1
        assert result.value.stats.total_overdue == 0
