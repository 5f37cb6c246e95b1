"""Schema Generators

Export schemas as JSON Schema documents and OpenAPI components. Export is
one-way and lossy: transforms and refinements have no JSON Schema
counterpart and are left out.

Features:
- JSON Schema draft 2020-12 documents with $schema
- OpenAPI 3.1 components/schemas section from named schemas
"""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from wenfit.core.schema import Schema

DRAFTS: dict[str, str] = {
    "2020-12": "https://json-schema.org/draft/2020-12/schema",
    "2019-09": "https://json-schema.org/draft/2019-09/schema",
    "07": "http://json-schema.org/draft-07/schema#",
}


class SchemaGenerator(ABC):
    """Base class for schema generators."""

    @abstractmethod
    def generate(self, schema: Schema) -> str:
        """Generate schema representation."""

    def generate_all(self, *schemas: Schema, separator: str = "\n\n") -> str:
        """Generate each schema in turn, joined by separator."""
        return separator.join(self.generate(s) for s in schemas)


class JSONSchemaGenerator(SchemaGenerator):
    """Generate JSON Schema documents."""

    def __init__(self, draft: str = "2020-12", indent: int | None = 2):
        if draft not in DRAFTS: raise ValueError(f"Unsupported draft {draft!r}; expected one of {sorted(DRAFTS)}")
        self.draft, self.indent = draft, indent

    def to_dict(self, schema: Schema, *, title: str | None = None) -> dict[str, Any]:
        document = {"$schema": DRAFTS[self.draft], **schema.to_json_schema()}
        if title: document["title"] = title
        return document

    def generate(self, schema: Schema) -> str:
        """Generate JSON Schema text; dates and decimals in defaults render as strings."""
        return json.dumps(self.to_dict(schema), indent=self.indent, default=str)


class OpenAPIGenerator(SchemaGenerator):
    """Generate OpenAPI 3.1 compatible schemas."""

    def generate(self, schema: Schema) -> str:
        return json.dumps(schema.to_json_schema(), indent=2, default=str)

    def generate_components(self, **schemas: Schema) -> dict[str, Any]:
        """Generate the components/schemas section, keyed by the given names."""
        return {"schemas": {name: schema.to_json_schema() for name, schema in schemas.items()}}
