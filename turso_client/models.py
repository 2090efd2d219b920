"""
Typed shapes for Turso API payloads.

Field matching is case-insensitive: the API mixes ``Name`` and ``name``
style keys, sometimes within one object.
"""

from datetime import datetime
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TursoModel(BaseModel):
    """Base model: unknown keys are ignored, keys match without regard to case."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _match_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        names: Dict[str, str] = {}
        for name, info in cls.model_fields.items():
            key = info.alias or name
            names[key.lower()] = key
            names[name.lower()] = key

        matched = {}
        for key, value in data.items():
            target = names.get(key.lower(), key) if isinstance(key, str) else key
            if target in matched and target != key:
                continue
            matched[target] = value
        return matched


# ========== Databases ==========

class Database(TursoModel):
    id: str = Field(default="", alias="dbId")
    name: str = ""
    regions: List[str] = Field(default_factory=list)
    primary_region: str = Field(default="", alias="primaryRegion")
    hostname: str = ""
    version: str = ""
    group: str = ""
    sleeping: bool = False


class CreatedDatabase(TursoModel):
    database: Database
    username: str = ""


class DatabaseSeed(TursoModel):
    """Seed source for a new database: another database or a dump."""

    type: str
    name: Optional[str] = Field(default=None, alias="value")
    url: Optional[str] = None
    timestamp: Optional[datetime] = None


class DatabaseConfig(TursoModel):
    allow_attach: bool = False


class QueryStats(TursoModel):
    query: str = ""
    rows_read: int = 0
    rows_written: int = 0


class DatabaseStats(TursoModel):
    top_queries: List[QueryStats] = Field(default_factory=list)


class Usage(TursoModel):
    rows_read: int = 0
    rows_written: int = 0
    storage_bytes_used: int = Field(default=0, alias="storage_bytes")
    bytes_synced: int = 0


class InstanceUsage(TursoModel):
    uuid: str = ""
    usage: Usage = Field(default_factory=Usage)


class DatabaseUsage(TursoModel):
    uuid: str = ""
    instances: List[InstanceUsage] = Field(default_factory=list)
    usage: Usage = Field(default_factory=Usage)


# ========== Groups and tokens ==========

class Group(TursoModel):
    name: str = ""
    locations: List[str] = Field(default_factory=list)
    primary: str = ""
    archived: bool = False
    version: str = ""


class Entities(TursoModel):
    databases: List[str] = Field(default_factory=list)


class PermissionsClaim(TursoModel):
    """Extra permissions embedded in a database or group token."""

    read_attach: Entities = Field(default_factory=Entities)


# ========== Instances ==========

class Instance(TursoModel):
    uuid: str = ""
    name: str = ""
    type: str = ""
    region: str = ""
    hostname: str = ""


# ========== Organizations ==========

class Organization(TursoModel):
    name: str = ""
    slug: str = ""
    type: str = ""
    stripe_id: Optional[str] = None
    overages: bool = False


class OrganizationTotals(TursoModel):
    rows_read: int = 0
    rows_written: int = 0
    storage_bytes_used: int = Field(default=0, alias="storage_bytes")
    bytes_synced: int = 0
    databases: int = 0
    locations: int = 0
    groups: int = 0


class OrganizationUsage(TursoModel):
    uuid: str = ""
    usage: OrganizationTotals = Field(default_factory=OrganizationTotals)
    databases: List[DatabaseUsage] = Field(default_factory=list)


class Member(TursoModel):
    username: str = ""
    role: str = ""


class Invite(TursoModel):
    email: str = ""
    role: str = ""
    accepted: bool = False


# ========== Account ==========

class ApiToken(TursoModel):
    id: str = ""
    name: str = ""


class CreatedApiToken(TursoModel):
    id: str = ""
    name: str = ""
    value: str = ""


class UserInfo(TursoModel):
    username: str = ""
    plan: str = ""


# ========== Billing ==========

class Invoice(TursoModel):
    number: str = Field(default="", alias="invoice_number")
    amount: str = Field(default="", alias="amount_due")
    due_date: str = ""
    paid_at: str = ""
    payment_failed_at: str = ""
    invoice_pdf: str = ""


class PlanQuotas(TursoModel):
    rows_read: int = Field(default=0, alias="rowsRead")
    rows_written: int = Field(default=0, alias="rowsWritten")
    databases: int = 0
    bytes_synced: int = Field(default=0, alias="bytesSynced")
    locations: int = 0
    storage: int = 0
    groups: int = 0


class Plan(TursoModel):
    name: str = ""
    price: str = ""
    quotas: PlanQuotas = Field(default_factory=PlanQuotas)


class Subscription(TursoModel):
    plan: str = ""
    timeline: str = ""
    overages: bool = False


# ========== Locations ==========

class Location(TursoModel):
    code: str = ""
    description: str = ""


class LocationDetails(TursoModel):
    code: str = ""
    description: str = ""
    closest: List[Location] = Field(default_factory=list)
