"""The business / domain / service / cluster tree served by the v1 API."""

from __future__ import annotations

from dataclasses import dataclass, field

_CLUSTER_ATTRIBUTES = {"cluster_name": "name", "cluster_describe": "desc"}
_SERVICE_ATTRIBUTES = {
    "service_id": "name",
    "service_master": "owner",
    "service_describe": "desc",
}
_BUSINESS_ATTRIBUTES = {"business_name": "name", "business_master": "leader"}


def _apply(target: object, mapping: dict[str, str], uid: str, value: str) -> None:
    attribute = mapping.get(uid)
    if attribute is not None:
        setattr(target, attribute, value)


@dataclass
class ServiceCluster:
    """A cluster that runs a service."""

    id: int
    name: str = ""
    desc: str = ""

    def add_attribute(self, uid: str, value: str) -> None:
        """Set the field named by an attribute uid; unknown uids are ignored."""
        _apply(self, _CLUSTER_ATTRIBUTES, uid, value)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "desc": self.desc}


@dataclass
class Service:
    """A service with the clusters it runs on."""

    id: int
    name: str = ""
    desc: str = ""
    owner: str = ""
    children: list[ServiceCluster] = field(default_factory=list)

    def add_attribute(self, uid: str, value: str) -> None:
        """Set the field named by an attribute uid; unknown uids are ignored."""
        _apply(self, _SERVICE_ATTRIBUTES, uid, value)

    def add_cluster(self, cluster_id: int, uid: str, value: str) -> None:
        """Set an attribute on the cluster with this id, creating it if absent."""
        cluster = next((c for c in self.children if c.id == cluster_id), None)
        if cluster is None:
            cluster = ServiceCluster(id=cluster_id)
            self.children.append(cluster)
        cluster.add_attribute(uid, value)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "desc": self.desc,
            "owner": self.owner,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class Domain:
    """A business domain grouping services."""

    id: int
    name: str = ""
    children: list[Service] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class Business:
    """A business line, the root of the application tree."""

    id: int
    name: str = ""
    leader: str = ""
    children: list[Domain] = field(default_factory=list)

    def add_attribute(self, uid: str, value: str) -> None:
        """Set the field named by an attribute uid; unknown uids are ignored."""
        _apply(self, _BUSINESS_ATTRIBUTES, uid, value)

    def add_service(self, domain_id: int, service_id: int, uid: str, value: str) -> None:
        """Set an attribute on a service of a known domain, creating the service if absent.

        Nothing happens when no domain has ``domain_id``.
        """
        found = False
        for domain in self.children:
            if domain.id != domain_id:
                continue
            service = next((s for s in domain.children if s.id == service_id), None)
            if service is not None:
                service.add_attribute(uid, value)
                found = True
            elif not found:
                service = Service(id=service_id)
                service.add_attribute(uid, value)
                domain.children.append(service)

    def add_domain(self, domain: Domain) -> None:
        """Add a domain unless one with the same id is already present."""
        if not any(child.id == domain.id for child in self.children):
            self.children.append(domain)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "leader": self.leader,
            "children": [child.to_dict() for child in self.children],
        }