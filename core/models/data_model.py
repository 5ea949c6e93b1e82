# ============================================================================
# DATA MODEL DEFINITION
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core model - Hand-written YAML data model
# PURPOSE: Typed tables, fields, relations and security loaded from YAML
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: DataModel, TableDef, FieldDef, RelationDef, SecurityDef,
#          SecurityFunctionDef, PolicyDef
# DEPENDENCIES: pydantic
# ============================================================================
"""
Data Model Definition

A DataModel is the validated form of a model YAML file. Generators only
ever see these types; the two YAML layouts (models[].tables and
dataSchema[]) are folded into one ordered list of TableDef by the parser.

Field and table order follows the YAML document order.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldDef(BaseModel):
    """A column in a model table."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: Optional[str] = None
    primary: bool = False
    unique: bool = False
    not_null: bool = Field(default=False, alias="notNull")
    default: Optional[Any] = None
    label: Optional[str] = None
    ref: Optional[str] = None            # "<table>.<column>"

    @property
    def ref_table(self) -> Optional[str]:
        """Table part of ref, if any."""
        if not self.ref:
            return None
        return self.ref.split(".")[0]

    @property
    def has_default(self) -> bool:
        return self.default is not None and self.default != ""

    def default_sql(self) -> str:
        """Default value rendered as SQL text."""
        if isinstance(self.default, bool):
            return "true" if self.default else "false"
        return str(self.default)


class RelationDef(BaseModel):
    """A relation between model tables (documentation only)."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: Optional[str] = None           # e.g. hasMany, belongsTo
    target: Optional[str] = None
    foreign_key: Optional[str] = Field(default=None, alias="foreignKey")
    ref: Optional[str] = None


class TableDef(BaseModel):
    """
    A table in the data model.

    skip_create marks tables provided by the platform (auth.users and
    similar) that must not be created.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str
    fields: Dict[str, FieldDef] = Field(default_factory=dict)
    relations: Dict[str, RelationDef] = Field(default_factory=dict)
    skip_create: bool = Field(default=False, alias="skipCreate")
    description: Optional[str] = None

    @field_validator("fields", "relations", mode="before")
    @classmethod
    def handle_empty_mapping(cls, v):
        """Treat a null mapping, or null entries inside it, as empty."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return {key: ({} if value is None else value) for key, value in v.items()}
        return v


class SecurityFunctionDef(BaseModel):
    """A security helper function, explicit SQL or from a template."""
    model_config = ConfigDict(extra="allow")

    sql: Optional[str] = None
    use_template: bool = True
    template_type: str = "simple"


class PolicyDef(BaseModel):
    """An RLS policy for one table and one action."""
    model_config = ConfigDict(extra="allow")

    using: Optional[str] = None
    role: Optional[List[str]] = None
    use_template: bool = True
    template_type: str = "simple"

    @field_validator("role", mode="before")
    @classmethod
    def handle_string_input(cls, v):
        """Allow single string as shorthand for single-item list."""
        if isinstance(v, str):
            return [v]
        return v


class SecurityDef(BaseModel):
    """Security section: functions and per-table, per-action policies."""
    functions: Dict[str, SecurityFunctionDef] = Field(default_factory=dict)
    policies: Dict[str, Dict[str, PolicyDef]] = Field(default_factory=dict)

    @field_validator("functions", "policies", mode="before")
    @classmethod
    def handle_empty_mapping(cls, v):
        if v is None:
            return {}
        return v


class DataModel(BaseModel):
    """
    Complete data model loaded from YAML.
    """
    tables: List[TableDef] = Field(default_factory=list)
    roles: List[str] = Field(default_factory=list)
    security: SecurityDef = Field(default_factory=SecurityDef)

    @field_validator("roles", "security", mode="before")
    @classmethod
    def handle_null(cls, v, info):
        if v is None:
            return [] if info.field_name == "roles" else {}
        return v

    @property
    def creatable_tables(self) -> List[TableDef]:
        """Tables that are not marked skip_create."""
        return [t for t in self.tables if not t.skip_create]

    def get_table(self, name: str) -> Optional[TableDef]:
        for table in self.tables:
            if table.name == name:
                return table
        return None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "FieldDef",
    "RelationDef",
    "TableDef",
    "SecurityFunctionDef",
    "PolicyDef",
    "SecurityDef",
    "DataModel",
]
