"""Stub Tax Authority Gateway

Accepts every document and returns a locally generated tracking id. No
request leaves the process.
"""

import logging
from uuid import uuid4
from src.app.services.tax_authority_gateway import TaxAuthorityGateway
from src.domain.tax_document import TaxDocument

logger = logging.getLogger(__name__)


class StubTaxAuthorityGateway(TaxAuthorityGateway):

    async def submit(self, document: TaxDocument) -> str:
        tracking_id = f"DEMO-{uuid4().hex[:13]}"
        logger.info(
            f"[SIMULATED SEND] Tenant: {document.tenant_id}, "
            f"Document: {document.number}, Tracking: {tracking_id}"
        )
        return tracking_id
