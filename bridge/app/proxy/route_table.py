"""
Route Table
===========

Declarative mapping from local bridge routes to CAST AI API paths.

Each RouteDescriptor produces one FastAPI endpoint (see routes.py). Path
parameters use FastAPI's ``{name}`` syntax in both ``path`` and
``upstream_path``; only the query parameters listed in ``query_params`` are
forwarded upstream.

Locally every parameter is routed with the ``:path`` convertor and its value
is re-read from the raw, still percent-encoded request path (see
``resolve_route``), so an encoded slash stays inside its parameter.
"""

import re
import string
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from urllib.parse import quote, unquote


@dataclass(frozen=True)
class RouteDescriptor:
    """
    Static description of one forwarded route.

    Attributes:
        name: Unique route name (used as the OpenAPI operation id)
        path: Local path pattern, e.g. /clusters/{clusterId}
        upstream_path: CAST AI path template with the same placeholders
        method: HTTP method, used both locally and upstream
        query_params: Names of query parameters forwarded when present
        tag: OpenAPI tag for grouping in /docs
        summary: One-line description shown in /docs
    """
    name: str
    path: str
    upstream_path: str
    method: str = "GET"
    query_params: Tuple[str, ...] = ()
    tag: str = "CAST AI"
    summary: str = ""
    path_params: Tuple[str, ...] = field(init=False)
    _raw_pattern: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        names = []
        pattern = []
        for literal, name, _, _ in string.Formatter().parse(self.path):
            pattern.append(re.escape(literal))
            if name:
                names.append(name)
                pattern.append(f"(?P<{name}>[^/]+)")
        names = tuple(names)
        upstream_names = {
            name for _, name, _, _ in string.Formatter().parse(self.upstream_path) if name
        }
        if set(names) != upstream_names:
            raise ValueError(
                f"Route {self.name}: path parameters {sorted(names)} do not match "
                f"upstream parameters {sorted(upstream_names)}"
            )
        object.__setattr__(self, "path_params", names)
        object.__setattr__(self, "_raw_pattern", re.compile("".join(pattern)))

    @property
    def route_path(self) -> str:
        """Local path registered with the router, every parameter as ``{name:path}``."""
        return re.sub(r"\{(\w+)\}", r"{\1:path}", self.path)

    def match_raw_path(self, raw_path: str) -> Optional[Dict[str, str]]:
        """
        Match a raw request path against this route.

        Each parameter must be exactly one segment of the raw path; its
        value is percent-decoded only after the match.

        Returns:
            Decoded path values, or None if the path does not match
        """
        match = self._raw_pattern.fullmatch(raw_path)
        if match is None:
            return None
        return {name: unquote(value) for name, value in match.groupdict().items()}

    def build_upstream_path(self, path_values: Dict[str, str]) -> str:
        """
        Substitute path parameters into the upstream template.

        Values are percent-encoded, slashes included, so a parameter can
        never escape its path segment.

        Raises:
            KeyError: If a declared path parameter is missing
        """
        encoded = {
            name: quote(str(path_values[name]), safe="")
            for name in self.path_params
        }
        return self.upstream_path.format(**encoded)


# ============================================================================
# CAST AI Routes
# ============================================================================

ROUTES: Tuple[RouteDescriptor, ...] = (
    # Organization Management
    RouteDescriptor(
        name="list_organizations",
        path="/organizations",
        upstream_path="/v1/organizations",
        tag="Organizations",
        summary="List user organizations",
    ),

    # Cluster Management
    RouteDescriptor(
        name="list_clusters",
        path="/clusters",
        upstream_path="/v1/kubernetes/external-clusters",
        tag="Clusters",
        summary="List clusters",
    ),
    RouteDescriptor(
        name="get_cluster",
        path="/clusters/{clusterId}",
        upstream_path="/v1/kubernetes/external-clusters/{clusterId}",
        tag="Clusters",
        summary="Get cluster details",
    ),
    RouteDescriptor(
        name="get_cluster_summary",
        path="/clusters/{clusterId}/summary",
        upstream_path="/v1/cost-reports/clusters/{clusterId}/summary",
        tag="Clusters",
        summary="Get cluster cost summary",
    ),

    # Cost Optimization
    RouteDescriptor(
        name="get_cluster_cost_report",
        path="/clusters/{clusterId}/cost-report",
        upstream_path="/v1/cost-reports/clusters/{clusterId}/cost",
        query_params=("startTime", "endTime"),
        tag="Cost",
        summary="Get cluster cost report",
    ),
    RouteDescriptor(
        name="get_cluster_estimated_savings",
        path="/clusters/{clusterId}/estimated-savings",
        upstream_path="/v1/cost-reports/clusters/{clusterId}/estimated-savings",
        tag="Cost",
        summary="Get estimated savings for a cluster",
    ),
    RouteDescriptor(
        name="get_cluster_workload_costs",
        path="/clusters/{clusterId}/workload-costs",
        upstream_path="/v1/cost-reports/clusters/{clusterId}/workload-costs",
        query_params=("startTime", "endTime"),
        tag="Cost",
        summary="Get workload costs for a cluster",
    ),
    RouteDescriptor(
        name="get_organization_daily_cost",
        path="/organization/daily-cost",
        upstream_path="/v1/cost-reports/organization/daily-cost",
        query_params=("startTime", "endTime"),
        tag="Cost",
        summary="Get organization daily cost",
    ),

    # Security
    RouteDescriptor(
        name="list_security_images",
        path="/security/images",
        upstream_path="/v1/security/insights/images",
        query_params=("limit", "severityThreshold"),
        tag="Security",
        summary="List container images with security insights",
    ),
    RouteDescriptor(
        name="get_image_vulnerabilities",
        path="/security/images/{tagId}/vulnerabilities",
        upstream_path="/v1/security/insights/images/{tagId}/vulnerabilities",
        tag="Security",
        summary="List vulnerabilities of an image tag",
    ),
    RouteDescriptor(
        name="get_security_best_practices",
        path="/security/best-practices",
        upstream_path="/v1/security/insights/best-practices",
        query_params=("clusterId",),
        tag="Security",
        summary="Get best practice checks",
    ),

    # Workload Optimization
    RouteDescriptor(
        name="list_cluster_workloads",
        path="/clusters/{clusterId}/workloads",
        upstream_path="/v1/kubernetes/clusters/{clusterId}/workloads",
        tag="Workloads",
        summary="List cluster workloads",
    ),
    RouteDescriptor(
        name="get_cluster_workload_efficiency",
        path="/clusters/{clusterId}/workload-efficiency",
        upstream_path="/v1/cost-reports/clusters/{clusterId}/workload-efficiency",
        tag="Workloads",
        summary="Get workload efficiency for a cluster",
    ),
    RouteDescriptor(
        name="list_cluster_unscheduled_pods",
        path="/clusters/{clusterId}/unscheduled-pods",
        upstream_path="/v1/kubernetes/clusters/{clusterId}/unscheduled-pods",
        tag="Workloads",
        summary="List unscheduled pods",
    ),

    # Nodes Management
    RouteDescriptor(
        name="list_cluster_nodes",
        path="/clusters/{clusterId}/nodes",
        upstream_path="/v1/kubernetes/external-clusters/{clusterId}/nodes",
        tag="Nodes",
        summary="List cluster nodes",
    ),
    RouteDescriptor(
        name="list_cluster_problematic_nodes",
        path="/clusters/{clusterId}/problematic-nodes",
        upstream_path="/v1/kubernetes/clusters/{clusterId}/problematic-nodes",
        tag="Nodes",
        summary="List problematic nodes",
    ),
)


# Aggregate route: /security/overview merges these four calls.
SECURITY_OVERVIEW_PATHS: Dict[str, str] = {
    "vulnerabilities": "/v1/security/insights/overview/vulnerabilities",
    "bestPractices": "/v1/security/insights/overview/best-practices",
    "attackPaths": "/v1/security/insights/overview/attack-paths",
    "imageSecure": "/v1/security/insights/overview/image-security",
}


def resolve_route(
    method: str, raw_path: str
) -> Optional[Tuple[RouteDescriptor, Dict[str, str]]]:
    """
    Find the route a raw request path addresses.

    The router matches on the decoded path, where ``a%2Fb`` and ``a/b`` look
    the same; this re-matches on the raw path so that the first reads as one
    parameter value and the second matches nothing.

    Args:
        method: Upper-case HTTP method
        raw_path: Request path as received, without the query string

    Returns:
        (descriptor, decoded path values), or None if no route matches
    """
    for descriptor in ROUTES:
        if descriptor.method != method:
            continue
        path_values = descriptor.match_raw_path(raw_path)
        if path_values is not None:
            return descriptor, path_values
    return None
