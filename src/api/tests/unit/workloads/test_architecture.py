"""Architecture tests for the workloads bounded context.

Workloads reaches identity and permissions only through the shared kernel,
never through IAM directly.
"""

from pytest_archon import archrule


class TestWorkloadsIsolation:
    def test_workloads_does_not_import_iam(self):
        (
            archrule("workloads_no_iam")
            .match("workloads*")
            .should_not_import("iam*")
            .check("workloads", only_direct_imports=True)
        )


class TestWorkloadsLayerBoundaries:
    def test_domain_does_not_import_infrastructure(self):
        (
            archrule("workloads_domain_no_infrastructure")
            .match("workloads.domain*")
            .should_not_import("workloads.infrastructure*", "sqlalchemy*")
            .check("workloads", only_direct_imports=True)
        )

    def test_domain_does_not_import_fastapi(self):
        (
            archrule("workloads_domain_no_fastapi")
            .match("workloads.domain*")
            .should_not_import("fastapi*", "starlette*")
            .check("workloads", only_direct_imports=True)
        )

    def test_application_does_not_import_presentation(self):
        (
            archrule("workloads_application_no_presentation")
            .match("workloads.application*")
            .should_not_import("workloads.presentation*", "fastapi*")
            .check("workloads", only_direct_imports=True)
        )
