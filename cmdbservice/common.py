"""Shared constants and small data types of the CMDB service."""

from __future__ import annotations

from dataclasses import dataclass, field

WEB_API_GROUP = "/cmdb/web"
NORMAL_API_GROUP = "/cmdb/api"
ATTRIBUTE_TYPE = "短字符,长字符,数字,浮点数,枚举,日期,时间,用户,布尔,列表"

LDAP_SERVER = "ldap://account.ym"
LDAP_AUTH_PASSWORD = ""
LDAP_AUTH_DN = "uid=nezha-user,ou=connectuser,dc=account,dc=ym"
LDAP_SEARCH_BASE_DN = "ou=People,dc=account,dc=ym"


def attribute_types() -> list[str]:
    """Return the attribute value types a model attribute may have, in order."""
    return ATTRIBUTE_TYPE.split(",")


@dataclass
class K8sResource:
    """A Kubernetes resource as reported by the compass service."""

    compass_name: str = ""
    resource_name: str = ""
    resource_attribute: dict[str, str] = field(default_factory=dict)
    resource_relation: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "compassName": self.compass_name,
            "resourceName": self.resource_name,
            "resourceAttribute": dict(self.resource_attribute),
            "resourceRelation": dict(self.resource_relation),
        }


@dataclass
class Relation:
    """A named relation of a given type."""

    name: str = ""
    type: str = ""