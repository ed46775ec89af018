"""Tests for resource routing.

This test suite validates that:
1. Each resource dispatches to its own executor
2. Resource values are matched case-insensitively
3. Unknown resources are fatal with nothing dispatched
4. The operation catalog is complete and self-consistent
"""
import pytest

from corda_rest_adapter.errors import UnsupportedOperationError, UnsupportedResourceError
from corda_rest_adapter.operations import (
    DEFAULT_OPERATIONS,
    OPERATIONS,
    Resource,
    catalog,
    get_template,
)
from corda_rest_adapter.router import ResourceRouter
from corda_rest_adapter.transport import MockTransport


class TestRouting:
    """Test resource selection and dispatch."""

    def test_router_builds_one_executor_per_resource(self, transport, resolver):
        router = ResourceRouter(transport=transport, credential_resolver=resolver)

        assert set(router.executors) == set(Resource)
        for resource, executor in router.executors.items():
            assert executor.resource is resource

    def test_dispatches_to_selected_resource(self, transport, resolver, make_source):
        router = ResourceRouter(transport=transport, credential_resolver=resolver)
        source = make_source("networkMap", "getNodeInfo")

        routed = router.handle([{}, {}], source)

        assert routed.resource is Resource.NETWORK_MAP
        assert routed.operation == "getNodeInfo"
        assert [r.item for r in routed.results] == [0, 1]
        assert all(c.url.endswith("/network/parties/me") for c in transport.calls)

    def test_display_name_is_accepted(self, transport, resolver, make_source):
        router = ResourceRouter(transport=transport, credential_resolver=resolver)
        source = make_source("TokenManagement", "getTokenTypes")

        results = router.execute([{}], source)

        assert results[0].json == {"ok": True}
        assert transport.calls[0].url.endswith("/tokens/types?limit=50&offset=0")

    def test_resource_is_read_from_first_record_only(self, transport, resolver, make_source):
        router = ResourceRouter(transport=transport, credential_resolver=resolver)
        source = make_source(
            "attachments", "listAttachments",
            records=[{}, {"resource": "networkMap"}],
        )

        routed = router.handle([{}, {}], source)

        assert routed.resource is Resource.ATTACHMENTS
        assert all(c.url.endswith("/attachments") for c in transport.calls)

    def test_unknown_resource_is_fatal(self, transport, resolver, make_source):
        router = ResourceRouter(transport=transport, credential_resolver=resolver)
        source = make_source("ledgerMagic", "doThings")

        with pytest.raises(UnsupportedResourceError) as exc_info:
            router.execute([{}], source, continue_on_fail=True)

        assert '"ledgerMagic"' in str(exc_info.value)
        assert exc_info.value.to_dict()["category"] == "routing"
        assert transport.call_count == 0

    def test_operation_from_other_resource_is_rejected(self, resolver, make_source):
        transport = MockTransport()
        router = ResourceRouter(transport=transport, credential_resolver=resolver)
        source = make_source("vaultQueries", "startFlow")

        with pytest.raises(UnsupportedOperationError):
            router.execute([{}], source)
        assert transport.call_count == 0


class TestCatalog:
    """Test the declarative operation table."""

    def test_thirty_operations_across_five_resources(self):
        counts = {r: len(ops) for r, ops in OPERATIONS.items()}

        assert counts == {
            Resource.VAULT_QUERIES: 6,
            Resource.FLOW_EXECUTION: 6,
            Resource.TOKEN_MANAGEMENT: 6,
            Resource.NETWORK_MAP: 6,
            Resource.ATTACHMENTS: 6,
        }

    def test_path_placeholders_are_declared_parameters(self):
        for operations in OPERATIONS.values():
            for template in operations.values():
                declared = {p.name for p in template.params}
                assert set(template.path_params) <= declared, template.name
                assert set(template.query_fields) <= declared, template.name
                assert set(template.body_fields) <= declared, template.name

    def test_get_requests_never_have_body(self):
        for operations in OPERATIONS.values():
            for template in operations.values():
                if template.method == "GET":
                    assert not template.body_fields and template.body_param is None

    def test_default_operations_exist(self):
        for resource, operation in DEFAULT_OPERATIONS.items():
            assert get_template(resource, operation).name == operation

    def test_catalog_description(self):
        data = catalog()

        names = [r["name"] for r in data["resources"]]
        assert names == ["vaultQueries", "flowExecution", "tokenManagement", "networkMap", "attachments"]
        vault = data["resources"][0]
        assert vault["display_name"] == "VaultQueries"
        query = vault["operations"][0]
        assert query["name"] == "queryVaultStates"
        paging = [p for p in query["parameters"] if p["name"] == "paging"][0]
        assert paging["default"] == '{"pageNumber": 1, "pageSize": 100}'
        assert paging["required"] is False

    def test_resource_parse(self):
        assert Resource.parse("vaultQueries") is Resource.VAULT_QUERIES
        assert Resource.parse("NetworkMap") is Resource.NETWORK_MAP
        assert Resource.parse(Resource.ATTACHMENTS) is Resource.ATTACHMENTS
        with pytest.raises(UnsupportedResourceError):
            Resource.parse(None)
