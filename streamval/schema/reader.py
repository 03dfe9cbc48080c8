"""
Schema reading.

Reading runs in two phases:

1. Parse: the schema text is tokenized with :class:`JsonEventParser` (so
   numbers are exact and every value has a source location) and the
   schema tree is built bottom-up. Objects holding ``$ref`` become
   :class:`ReferenceSchema` nodes; nodes declaring ``$id`` are indexed.
2. Resolve: every recorded reference is resolved against the identifier
   index, falling back to the caller's resolvers, and bound in the
   :class:`SchemaGraph`. Reference loops are then detected and the graph
   is sealed.

Problems never stop reading; they are collected and reported together.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote, urldefrag, urljoin

from .._logging import scoped_logger
from ..config import config
from ..exceptions import InvalidSchemaError
from ..keywords.variants import ContentEncoding, ContentMediaType, Format, Keyword, Reference, Unknown
from ..keywords.vocabulary import MalformedKeyword, read_keyword
from ..parser.assembler import ValueAssembler
from ..parser.events import Location, is_value_start
from ..parser.tokenizer import JsonEventParser
from ..pointer import PointerTracker, join_pointer
from ..problem.problem import Problem, ProblemBuilder
from .graph import SchemaGraph
from .schema import FALSE_SCHEMA, TRUE_SCHEMA, ReferenceSchema, Schema

log = scoped_logger("schema")

__all__ = ["Resolver", "SchemaReader", "read_schema"]

#: Looks up a schema by absolute URI; None when unknown.
Resolver = Callable[[str], "Schema | None"]


@dataclass
class _PendingReference:
    schema: ReferenceSchema
    pointer: str
    lax: bool


def _with_fragment(uri: str) -> str:
    return uri if "#" in uri else uri + "#"


def _source_text(source: Any) -> str | bytes:
    if isinstance(source, (str, bytes)):
        return source
    if isinstance(source, type) and hasattr(source, "model_json_schema"):
        return json.dumps(source.model_json_schema())
    return json.dumps(source)


class SchemaReader:
    """
    Reads one schema document.

    Parameters
    ----------
    source : str, bytes, dict, bool or pydantic model class
        The schema. JSON text is parsed as is; Python values are serialized
        first so that numbers read the same way; pydantic models contribute
        their ``model_json_schema()``.
    base_uri : str, optional
        URI the document is known by. Relative ``$id`` and ``$ref`` values
        are resolved against it.
    resolvers : iterable of callables, optional
        Consulted in order for references the document does not define.
        Each takes an absolute URI (without fragment for pointer
        references) and returns a :class:`Schema` or None.
    strict : bool, optional
        Report unknown keywords. Defaults to ``config.strict``.
    strict_formats : bool, optional
        Report unknown format and content names. Defaults to
        ``config.strict_formats``.

    Example
    -------
    >>> reader = SchemaReader('{"$ref": "#/definitions/missing"}')
    >>> schema = reader.read()
    >>> [p.message for p in reader.problems]
    ['schema.problem.reference']
    """

    def __init__(
        self,
        source: Any,
        *,
        base_uri: str = "",
        resolvers: Iterable[Resolver] = (),
        strict: bool | None = None,
        strict_formats: bool | None = None,
    ) -> None:
        self._source = source
        self._base_uri = base_uri
        self._resolvers = tuple(resolvers)
        self._strict = config.strict if strict is None else strict
        self._strict_formats = config.strict_formats if strict_formats is None else strict_formats

        self._graph = SchemaGraph()
        self._index: dict[str, Schema] = {}
        self._locations: dict[str, Location] = {}
        self._pending: list[_PendingReference] = []
        self._problems: list[Problem] = []
        self._schema: Schema | None = None

    @property
    def problems(self) -> list[Problem]:
        """Compile-time problems found by :meth:`read`."""
        return list(self._problems)

    @property
    def graph(self) -> SchemaGraph:
        return self._graph

    def read(self) -> Schema:
        """
        Read and resolve the document.

        Returns the root schema even when problems were found.

        Raises
        ------
        JsonParsingError
            If the source is not well-formed JSON.
        """
        if self._schema is not None:
            return self._schema

        value = self._parse(_source_text(self._source))
        root = self._read(value, "", self._base_uri, lax=False)
        self._index.setdefault(_with_fragment(urldefrag(self._base_uri)[0]), root)
        self._resolve()
        for reference in self._graph.detect_loops():
            pending = self._pending_for(reference)
            if not pending.lax:
                self._report(
                    pending.pointer + "/$ref",
                    "schema.problem.reference.loop",
                    schema=reference,
                    keyword="$ref",
                    ref=reference.ref,
                    targetId=reference.target_id,
                )
        for node in self._graph:
            node.compile()
        self._graph.seal()
        self._schema = root

        log.debug(
            "Schema read",
            extra={"base_uri": self._base_uri, "nodes": len(self._graph), "problems": len(self._problems)},
        )
        return root

    # =========================================================================
    # Parse phase
    # =========================================================================

    def _parse(self, text: str | bytes) -> Any:
        parser = JsonEventParser()
        tracker = PointerTracker()
        assembler = ValueAssembler()
        parser.feed(text)
        parser.close()
        for event in parser.events():
            tracker.update(event, parser)
            if is_value_start(event):
                self._locations.setdefault(tracker.pointer, parser.location)
            assembler.append(event, parser)
        return assembler.value

    def _read(self, value: Any, pointer: str, base: str, lax: bool) -> Schema:
        if value is True:
            return TRUE_SCHEMA
        if value is False:
            return FALSE_SCHEMA
        if not isinstance(value, dict):
            if not lax:
                self._report(pointer, "schema.problem.schema.malformed", actual=_json_type(value))
            return Schema(json=value)

        identifier = None
        scope = base
        declared = value.get("$id")
        if isinstance(declared, str) and not isinstance(value.get("$ref"), str):
            identifier = urljoin(base, declared)
            scope = identifier

        keywords: dict[str, Keyword] = {}
        for name, keyword_value in value.items():
            keywords[name] = self._read_keyword(name, keyword_value, pointer, scope, lax)

        reference = keywords.get("$ref")
        if isinstance(reference, Reference):
            schema: Schema = ReferenceSchema(
                reference.ref,
                _with_fragment(urljoin(base, reference.ref)),
                self._graph,
                keywords,
                value,
            )
            self._pending.append(_PendingReference(schema, pointer, lax))
        else:
            schema = Schema(keywords, value, identifier)
            if identifier is not None and not lax:
                self._index.setdefault(_with_fragment(identifier), schema)
        self._graph.add(schema)
        return schema

    def _read_keyword(self, name: str, value: Any, pointer: str, scope: str, lax: bool) -> Keyword:
        keyword_pointer = pointer + join_pointer([name])

        def read_subschema(subvalue: Any, *tokens: str) -> Schema:
            return self._read(subvalue, keyword_pointer + join_pointer(tokens), scope, lax)

        try:
            keyword = read_keyword(name, value, read_subschema)
        except MalformedKeyword as e:
            if not lax:
                self._report(keyword_pointer, "schema.problem.keyword.malformed", keyword=name, reason=e.reason)
            return self._unknown(name, value, keyword_pointer, scope)

        if keyword is None:
            if self._strict and not lax:
                self._report(keyword_pointer, "schema.problem.keyword.unknown", keyword=name)
            return self._unknown(name, value, keyword_pointer, scope)

        if self._strict_formats and not lax:
            self._check_support(keyword, keyword_pointer)
        return keyword

    def _unknown(self, name: str, value: Any, pointer: str, scope: str) -> Unknown:
        schema = None
        if isinstance(value, (dict, bool)):
            schema = self._read(value, pointer, scope, lax=True)
        return Unknown(name, value, schema)

    def _check_support(self, keyword: Keyword, pointer: str) -> None:
        match keyword:
            case Format(attribute=attribute, supported=False):
                self._report(pointer, "schema.problem.format.unknown", keyword="format", attribute=attribute)
            case ContentEncoding(encoding=encoding, supported=False):
                self._report(
                    pointer, "schema.problem.contentEncoding.unknown", keyword="contentEncoding", encoding=encoding
                )
            case ContentMediaType(media_type=media_type, supported=False):
                self._report(
                    pointer,
                    "schema.problem.contentMediaType.unknown",
                    keyword="contentMediaType",
                    mediaType=media_type,
                )

    # =========================================================================
    # Resolve phase
    # =========================================================================

    def _resolve(self) -> None:
        for pending in self._pending:
            reference = pending.schema
            target = self._lookup(reference.target_id)
            if target is None:
                log.debug(
                    "Unresolved reference",
                    extra={"ref": reference.ref, "target_id": reference.target_id, "pointer": pending.pointer},
                )
                if not pending.lax:
                    self._report(
                        pending.pointer + "/$ref",
                        "schema.problem.reference",
                        schema=reference,
                        keyword="$ref",
                        ref=reference.ref,
                        targetId=reference.target_id,
                    )
                continue
            log.debug("Resolved reference", extra={"ref": reference.ref, "target_id": reference.target_id})
            self._graph.bind(reference, target)

    def _lookup(self, target_id: str) -> Schema | None:
        document, fragment = urldefrag(target_id)
        if fragment == "" or fragment.startswith("/"):
            root = self._index.get(document + "#")
            if root is None:
                root = self._external(document)
                if root is None:
                    return None
                self._index[document + "#"] = root
            return root.get_subschema(unquote(fragment))
        schema = self._index.get(target_id)
        if schema is None:
            schema = self._external(target_id)
        return schema

    def _external(self, uri: str) -> Schema | None:
        for resolver in self._resolvers:
            schema = resolver(uri)
            if schema is not None:
                log.debug("Reference resolved externally", extra={"uri": uri})
                return schema
        return None

    def _pending_for(self, reference: ReferenceSchema) -> _PendingReference:
        for pending in self._pending:
            if pending.schema is reference:
                return pending
        raise KeyError(reference.ref)

    # =========================================================================
    # Problems
    # =========================================================================

    def _report(
        self,
        pointer: str,
        message: str,
        *,
        schema: Schema | None = None,
        keyword: str | None = None,
        **params: Any,
    ) -> None:
        if keyword is not None:
            params.setdefault("keyword", keyword)
        problem = (
            ProblemBuilder(self._locations.get(pointer), pointer)
            .with_schema(schema)
            .with_keyword(keyword)
            .with_message(message, **params)
            .with_resolvability(False)
            .build()
        )
        log.warning(problem.text, extra={"pointer": pointer, "code": message})
        self._problems.append(problem)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "number"


def read_schema(
    source: Any,
    *,
    base_uri: str = "",
    resolvers: Iterable[Resolver] = (),
    strict: bool | None = None,
    strict_formats: bool | None = None,
) -> Schema:
    """
    Read a schema document.

    See :class:`SchemaReader` for the parameters.

    Raises
    ------
    InvalidSchemaError
        If the document has compile-time problems. The exception carries
        every problem and the schema built anyway.
    JsonParsingError
        If the source is not well-formed JSON.

    Example
    -------
    >>> schema = read_schema({"type": "integer", "minimum": 0})
    >>> schema.keywords["minimum"].limit
    0
    """
    reader = SchemaReader(
        source,
        base_uri=base_uri,
        resolvers=resolvers,
        strict=strict,
        strict_formats=strict_formats,
    )
    schema = reader.read()
    if reader.problems:
        raise InvalidSchemaError(tuple(reader.problems), schema)
    return schema
