"""
Infrastructure adapters: HTTP customer directory and local attachment store.
"""

import asyncio
import os

import httpx
import pytest

from dealroom.domain.exceptions import NotFoundError, UpstreamError
from dealroom.infrastructure.external import HttpCustomerDirectory
from dealroom.infrastructure.storage import LocalAttachmentStore


def directory(handler, token=None):
    return HttpCustomerDirectory(
        "http://customers.test/api/",
        token=token,
        transport=httpx.MockTransport(handler),
    )


class TestHttpCustomerDirectory:
    def test_resolves_customer(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(
                200,
                json={
                    "id": "cust-42",
                    "name": "Acme Construction",
                    "riskProfile": {"creditScore": 735, "dscr": 1.35, "yearsInBusiness": 8},
                },
            )

        profile = asyncio.run(directory(handler, token="svc-token").resolve("cust-42"))

        assert seen == {
            "url": "http://customers.test/api/customers/cust-42",
            "auth": "Bearer svc-token",
        }
        assert profile.name == "Acme Construction"
        assert profile.risk_profile.credit_score == 735
        assert profile.risk_profile.years_in_business == 8
        assert profile.risk_profile.collateral_coverage is None

    def test_without_risk_profile(self):
        profile = asyncio.run(
            directory(lambda request: httpx.Response(200, json={"name": "Solo LLC"})).resolve("c-1")
        )
        assert profile.customer_id == "c-1"
        assert profile.risk_profile is None

    def test_not_found(self):
        with pytest.raises(NotFoundError):
            asyncio.run(directory(lambda request: httpx.Response(404)).resolve("missing"))

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, text="boom"),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json={"id": "c-1"}),
        ],
    )
    def test_upstream_failures(self, response):
        with pytest.raises(UpstreamError) as excinfo:
            asyncio.run(directory(lambda request: response).resolve("c-1"))
        assert excinfo.value.service == "customer_directory"

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError):
            asyncio.run(directory(handler).resolve("c-1"))


class TestLocalAttachmentStore:
    def test_upload_writes_file(self, tmp_path):
        store = LocalAttachmentStore(str(tmp_path), public_base="/files/")

        stored = asyncio.run(store.upload("../../Q3 statements.pdf", b"%PDF-1.4", "application/pdf"))

        assert stored.url.startswith("/files/")
        assert stored.url.endswith("_Q3_statements.pdf")
        assert stored.file_size == 8
        saved = os.listdir(tmp_path / "attachments")
        assert len(saved) == 1
        assert (tmp_path / "attachments" / saved[0]).read_bytes() == b"%PDF-1.4"

    def test_default_file_type(self, tmp_path):
        store = LocalAttachmentStore(str(tmp_path))
        stored = asyncio.run(store.upload("notes", b"", ""))
        assert stored.file_type == "application/octet-stream"

    def test_unwritable_base(self, tmp_path):
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("x")
        store = LocalAttachmentStore(str(blocker))

        with pytest.raises(UpstreamError):
            asyncio.run(store.upload("a.pdf", b"data", "application/pdf"))
