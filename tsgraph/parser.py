"""TypeScript front end built on Tree-sitter.

Parses ``.ts``/``.tsx`` files into ``SourceFile`` objects that index their
top-level declarations, import clauses and export clauses, and resolves
module specifiers and symbols across the files of a ``Project``.

Tree-sitter gives an error-tolerant concrete syntax tree, so a file with
minor syntax errors still yields every declaration the parser could recover.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import tree_sitter_typescript
from tree_sitter import Language, Parser as TSParser

from . import config
from .errors import SourceFileNotFoundError, UnresolvedSymbolError
from .import_paths import (
    ImportPathType,
    alias_candidates,
    get_import_path_type,
    is_path_specifier,
    load_tsconfig,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# File-extension <-> grammar mapping
# ---------------------------------------------------------------------------
LANGUAGE_MAP: Dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

# Tried in order when a specifier has no extension.
RESOLUTION_SUFFIXES: Tuple[str, ...] = (".ts", ".tsx", ".d.ts", ".mts", ".cts")
# Emitted-JS specifiers (`./user.js`) point at their TypeScript source.
_JS_SUFFIXES: Tuple[str, ...] = (".js", ".jsx", ".mjs", ".cjs")

DECLARATION_TYPES: Set[str] = {
    "class_declaration",
    "abstract_class_declaration",
    "interface_declaration",
    "enum_declaration",
    "type_alias_declaration",
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "lexical_declaration",
    "variable_declaration",
    "internal_module",
    "module",
}
ANONYMOUS_DEFAULT_TYPES: Set[str] = {
    "class", "function_expression", "function", "generator_function", "arrow_function",
}
# an exported function may be preceded by overload signatures
_OVERLOADABLE: Set[str] = {"function_signature", "function_declaration", "generator_function_declaration"}
CLASS_MEMBER_TYPES: Set[str] = {
    "method_definition", "public_field_definition", "abstract_method_signature",
}
INTERFACE_MEMBER_TYPES: Set[str] = {"property_signature", "method_signature"}


def node_text(ts_node: Any) -> str:
    return ts_node.text.decode("utf-8") if ts_node is not None else ""


def string_value(ts_node: Any) -> str:
    """Text of a string literal node without its quotes."""
    raw = node_text(ts_node)
    if len(raw) >= 2 and raw[0] in "'\"`" and raw[-1] == raw[0]:
        return raw[1:-1]
    return raw


def child_of_type(ts_node: Any, *types: str) -> Optional[Any]:
    for child in ts_node.children:
        if child.type in types:
            return child
    return None


def has_token(ts_node: Any, token: str) -> bool:
    return any(child.type == token for child in ts_node.children)


def _decorator_name(decorator: Any) -> str:
    expr = decorator.named_children[0] if decorator.named_children else None
    if expr is not None and expr.type == "call_expression":
        expr = expr.child_by_field_name("function")
    return node_text(expr) if expr is not None else node_text(decorator).lstrip("@")


def decorator_names(ts_node: Any) -> List[str]:
    """Names of the decorators attached to *ts_node* (``@Injectable()`` -> ``Injectable``)."""
    return [_decorator_name(child) for child in ts_node.children if child.type == "decorator"]


def binding_names(pattern: Any) -> List[str]:
    """Identifiers bound by a destructuring pattern."""
    if pattern.type in ("identifier", "shorthand_property_identifier_pattern"):
        return [node_text(pattern)]
    names: List[str] = []
    for child in pattern.named_children:
        if child.type == "pair_pattern":
            value = child.child_by_field_name("value")
            if value is not None:
                names.extend(binding_names(value))
        elif child.type in ("assignment_pattern", "object_assignment_pattern"):
            left = child.child_by_field_name("left") or (
                child.named_children[0] if child.named_children else None
            )
            if left is not None:
                names.extend(binding_names(left))
        elif child.type == "rest_pattern":
            names.extend(binding_names(child))
        elif child.type in (
            "identifier", "shorthand_property_identifier_pattern",
            "object_pattern", "array_pattern",
        ):
            names.extend(binding_names(child))
    return names


def module_stem(file_path: str) -> str:
    """File name without its TypeScript extension (``user.d.ts`` -> ``user``)."""
    name = os.path.basename(file_path)
    if name.endswith(".d.ts"):
        return name[: -len(".d.ts")]
    return os.path.splitext(name)[0]


def normalize_path(path: Any) -> str:
    return os.path.normpath(os.path.abspath(str(path)))


# ===================================================================
# Parsed structures
# ===================================================================

@dataclass
class Declaration:
    """A named declaration found in a source file.

    ``kind`` is the tree-sitter node type, refined for class members
    (``get_accessor``, ``set_accessor``, ``constructor``).  ``node`` is the
    declaration itself (the ``variable_declarator`` for variables) and
    ``container`` the statement that holds it, when different.
    """

    name: str
    kind: str
    file_path: str
    node: Any
    container: Any = None
    exported: bool = False
    default: bool = False
    ambient: bool = False
    owner: Optional[str] = None
    decorators: List[str] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return f"{self.owner}.{self.name}" if self.owner else self.name

    def members(self) -> List["Declaration"]:
        """Class or interface members, one per (kind, name)."""
        if self.kind in ("class_declaration", "abstract_class_declaration", "class"):
            wanted = CLASS_MEMBER_TYPES
        elif self.kind == "interface_declaration":
            wanted = INTERFACE_MEMBER_TYPES
        else:
            return []
        body = self.node.child_by_field_name("body") or child_of_type(
            self.node, "class_body", "interface_body", "object_type",
        )
        if body is None:
            return []

        members: List[Declaration] = []
        seen: Set[Tuple[str, str]] = set()
        # method decorators are siblings preceding the method_definition
        pending: List[str] = []
        for child in body.named_children:
            if child.type == "decorator":
                pending.append(_decorator_name(child))
                continue
            leading, pending = pending, []
            if child.type not in wanted:
                continue
            name_node = child.child_by_field_name("name")
            if name_node is None:
                continue
            name = node_text(name_node)
            kind = _member_kind(child, name)
            if (kind, name) in seen:
                continue
            seen.add((kind, name))
            members.append(Declaration(
                name=name,
                kind=kind,
                file_path=self.file_path,
                node=child,
                owner=self.name,
                decorators=leading + decorator_names(child),
            ))
        return members


def _member_kind(member: Any, name: str) -> str:
    if member.type != "method_definition":
        return member.type
    if name == "constructor":
        return "constructor"
    if has_token(member, "get"):
        return "get_accessor"
    if has_token(member, "set"):
        return "set_accessor"
    return "method_definition"


@dataclass
class ImportSpecifier:
    name: str
    alias: Optional[str] = None
    type_only: bool = False

    @property
    def local_name(self) -> str:
        return self.alias or self.name


@dataclass
class ImportDeclaration:
    specifier: str
    node: Any = None
    default_name: Optional[str] = None
    namespace_name: Optional[str] = None
    named: List[ImportSpecifier] = field(default_factory=list)
    type_only: bool = False

    @property
    def has_bindings(self) -> bool:
        return bool(self.default_name or self.namespace_name or self.named)


@dataclass
class ExportSpecifier:
    name: str
    alias: Optional[str] = None
    type_only: bool = False

    @property
    def exported_name(self) -> str:
        return self.alias or self.name


@dataclass
class ExportDeclaration:
    """``export { ... }``, ``export { ... } from X``, ``export * from X`` or ``export * as ns from X``."""

    specifier: Optional[str] = None
    node: Any = None
    named: List[ExportSpecifier] = field(default_factory=list)
    wildcard: bool = False
    namespace_alias: Optional[str] = None
    type_only: bool = False

    @property
    def is_re_export(self) -> bool:
        return self.specifier is not None


@dataclass
class Resolution:
    """Where a symbol is actually declared."""

    declaration: Declaration
    source_file: "SourceFile"

    @property
    def file_path(self) -> str:
        return self.source_file.file_path


@dataclass
class ExternalReference:
    """A symbol imported from a package rather than a project file."""

    specifier: str
    name: str


# ===================================================================
# Source file
# ===================================================================

class SourceFile:
    """One parsed TypeScript file and the index of its top-level statements."""

    def __init__(self, file_path: str, text: str, tree: Any) -> None:
        self.file_path = file_path
        self.text = text
        self.tree = tree
        self.stem = module_stem(file_path)
        self.declarations: Dict[str, Declaration] = {}
        self.imports: List[ImportDeclaration] = []
        self.exports: List[ExportDeclaration] = []
        self.direct_exports: List[Declaration] = []
        self.module_declarations: List[str] = []
        self.project: Optional[Project] = None
        self._index(tree.root_node)

    def __repr__(self) -> str:
        return f"SourceFile({self.file_path!r})"

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def _index(self, root: Any) -> None:
        for stmt in root.named_children:
            if stmt.type == "import_statement":
                imp = self._parse_import(stmt)
                if imp is not None:
                    self.imports.append(imp)
            elif stmt.type == "export_statement":
                self._visit_export(stmt)
            elif stmt.type == "ambient_declaration":
                for inner in stmt.named_children:
                    if inner.type in DECLARATION_TYPES:
                        self._collect(inner, ambient=True)
            elif stmt.type == "expression_statement":
                # `namespace X {}` parses as an expression statement
                inner = stmt.named_children[0] if stmt.named_children else None
                if inner is not None and inner.type == "internal_module":
                    self._collect(inner)
            elif stmt.type in DECLARATION_TYPES:
                self._collect(stmt)
        self._scan_module_declarations(root)

    def _scan_module_declarations(self, root: Any) -> None:
        """Record every namespace, ``module`` and ``declare global`` block, nested ones included."""
        stack = [root]
        while stack:
            ts_node = stack.pop()
            if ts_node.type in ("internal_module", "module"):
                name = node_text(ts_node.child_by_field_name("name"))
                if name:
                    self.module_declarations.append(name)
            elif ts_node.type == "ambient_declaration" and has_token(ts_node, "global"):
                self.module_declarations.append("global")
            stack.extend(reversed(ts_node.named_children))

    def _collect(
        self,
        ts_node: Any,
        exported: bool = False,
        default: bool = False,
        ambient: bool = False,
        decorators: Optional[List[str]] = None,
    ) -> List[Declaration]:
        found: List[Declaration] = []
        outer_decorators = list(decorators or [])

        if ts_node.type in ("lexical_declaration", "variable_declaration"):
            for declarator in ts_node.named_children:
                if declarator.type != "variable_declarator":
                    continue
                name_node = declarator.child_by_field_name("name")
                if name_node is None:
                    continue
                for name in binding_names(name_node):
                    found.append(Declaration(
                        name=name, kind="variable_declarator", file_path=self.file_path,
                        node=declarator, container=ts_node, exported=exported,
                        ambient=ambient, decorators=outer_decorators,
                    ))
        elif ts_node.type in ("internal_module", "module"):
            name_node = ts_node.child_by_field_name("name")
            name = node_text(name_node)
            # `module "pkg" {}` augments a package; it declares nothing locally
            if name_node is not None and name_node.type != "string":
                found.append(Declaration(
                    name=name, kind=ts_node.type, file_path=self.file_path, node=ts_node,
                    exported=exported, ambient=ambient,
                ))
        else:
            name_node = ts_node.child_by_field_name("name")
            name = node_text(name_node) or ("default" if default else "")
            if not name:
                logger.debug("Skipping unnamed %s in %s", ts_node.type, self.file_path)
                return found
            found.append(Declaration(
                name=name, kind=ts_node.type, file_path=self.file_path, node=ts_node,
                exported=exported, default=default, ambient=ambient,
                decorators=outer_decorators + decorator_names(ts_node),
            ))

        for decl in found:
            self._register(decl)
            if exported:
                self._add_direct_export(decl)
        return found

    def _register(self, decl: Declaration) -> None:
        existing = self.declarations.get(decl.name)
        # overload signatures give way to the implementation
        if existing is None or (
            existing.kind == "function_signature" and decl.kind in _OVERLOADABLE and decl.kind != existing.kind
        ):
            self.declarations[decl.name] = decl

    def _add_direct_export(self, decl: Declaration) -> None:
        # overloads of one exported function collapse onto the implementation
        if decl.kind in _OVERLOADABLE:
            for i, existing in enumerate(self.direct_exports):
                if existing.kind in _OVERLOADABLE and (existing.name, existing.default) == (decl.name, decl.default):
                    if existing.kind == "function_signature" and decl.kind != "function_signature":
                        self.direct_exports[i] = decl
                    return
        self.direct_exports.append(decl)

    def _parse_import(self, stmt: Any) -> Optional[ImportDeclaration]:
        clause = child_of_type(stmt, "import_clause")
        require = child_of_type(stmt, "import_require_clause")
        source = stmt.child_by_field_name("source")
        if source is None and require is not None:
            source = require.child_by_field_name("source") or child_of_type(require, "string")
        if source is None:
            logger.debug("Import without a module specifier in %s", self.file_path)
            return None

        imp = ImportDeclaration(
            specifier=string_value(source),
            node=stmt,
            type_only=has_token(stmt, "type"),
        )
        if require is not None:
            ident = child_of_type(require, "identifier")
            imp.namespace_name = node_text(ident) or None
        if clause is None:
            return imp

        for child in clause.named_children:
            if child.type == "identifier":
                imp.default_name = node_text(child)
            elif child.type == "namespace_import":
                ident = child_of_type(child, "identifier")
                imp.namespace_name = node_text(ident) or None
            elif child.type == "named_imports":
                for spec in child.named_children:
                    if spec.type != "import_specifier":
                        continue
                    name_node = spec.child_by_field_name("name")
                    alias_node = spec.child_by_field_name("alias")
                    imp.named.append(ImportSpecifier(
                        name=string_value(name_node),
                        alias=node_text(alias_node) or None,
                        type_only=has_token(spec, "type"),
                    ))
        return imp

    def _visit_export(self, stmt: Any) -> None:
        is_default = has_token(stmt, "default")
        declaration = stmt.child_by_field_name("declaration")
        value = stmt.child_by_field_name("value")
        decorators = decorator_names(stmt)

        if declaration is not None:
            if declaration.type == "ambient_declaration":
                for inner in declaration.named_children:
                    if inner.type in DECLARATION_TYPES:
                        self._collect(inner, exported=True, ambient=True)
            elif declaration.type in DECLARATION_TYPES:
                self._collect(declaration, exported=True, default=is_default, decorators=decorators)
            else:
                # `export import Y = M.Shapes` and other forms with no graph entity
                logger.warning("Ignoring unsupported export %r in %s", node_text(stmt)[:60], self.file_path)
            return

        if is_default and value is not None:
            self._visit_default_value(value, decorators)
            return

        source = stmt.child_by_field_name("source")
        clause = child_of_type(stmt, "export_clause")
        ns_export = child_of_type(stmt, "namespace_export")
        wildcard = ns_export is not None or has_token(stmt, "*")
        if clause is None and not wildcard:
            # `export = x` and `export as namespace X` carry no ES module exports
            logger.warning("Ignoring unsupported export %r in %s", node_text(stmt)[:60], self.file_path)
            return

        exp = ExportDeclaration(
            specifier=string_value(source) if source is not None else None,
            node=stmt,
            wildcard=wildcard,
            type_only=has_token(stmt, "type"),
        )
        if ns_export is not None:
            alias_node = ns_export.named_children[-1] if ns_export.named_children else None
            exp.namespace_alias = string_value(alias_node) or None
        if clause is not None:
            for spec in clause.named_children:
                if spec.type != "export_specifier":
                    continue
                name_node = spec.child_by_field_name("name")
                alias_node = spec.child_by_field_name("alias")
                exp.named.append(ExportSpecifier(
                    name=string_value(name_node),
                    alias=string_value(alias_node) or None,
                    type_only=has_token(spec, "type"),
                ))
        self.exports.append(exp)

    def _visit_default_value(self, value: Any, decorators: List[str]) -> None:
        if value.type == "identifier":
            # `export default foo;` is `export { foo as default }`
            self.exports.append(ExportDeclaration(
                node=value.parent,
                named=[ExportSpecifier(name=node_text(value), alias="default")],
            ))
            return
        name_node = value.child_by_field_name("name") if value.type in ANONYMOUS_DEFAULT_TYPES else None
        decl = Declaration(
            name=node_text(name_node) or "default",
            kind=value.type,
            file_path=self.file_path,
            node=value,
            exported=True,
            default=True,
            decorators=decorators + decorator_names(value),
        )
        if name_node is not None:
            self._register(decl)
        self.direct_exports.append(decl)


# ===================================================================
# Tree-sitter parser
# ===================================================================

class TypeScriptParser:
    """Thin wrapper over the TypeScript and TSX Tree-sitter grammars."""

    # Map language name -> function in tree_sitter_typescript returning the grammar
    _GRAMMAR_FUNCTIONS: Dict[str, str] = {
        "typescript": "language_typescript",
        "tsx": "language_tsx",
    }

    def __init__(self) -> None:
        self._parsers: Dict[str, TSParser] = {}
        for lang, func_name in self._GRAMMAR_FUNCTIONS.items():
            ts_lang = Language(getattr(tree_sitter_typescript, func_name)())
            self._parsers[lang] = TSParser(ts_lang)
            logger.debug("Loaded tree-sitter parser for %s", lang)

    def supports(self, file_path: Any) -> bool:
        return Path(str(file_path)).suffix in LANGUAGE_MAP

    def parse(self, file_path: str, text: str) -> SourceFile:
        lang = LANGUAGE_MAP.get(Path(file_path).suffix, "typescript")
        tree = self._parsers[lang].parse(text.encode("utf-8"))
        if tree.root_node.has_error:
            logger.warning("Syntax errors in %s; mapping what could be recovered", file_path)
        return SourceFile(file_path, text, tree)


# ===================================================================
# Project
# ===================================================================

class Project:
    """A set of source files sharing one module resolution context.

    Files are keyed by normalized absolute path.  Files referenced through
    imports but never added explicitly are parsed lazily from disk.
    """

    def __init__(
        self,
        root: Any,
        tsconfig: Optional[Dict[str, Any]] = None,
        parser: Optional[TypeScriptParser] = None,
        extensions: Optional[Iterable[str]] = None,
        skip_dirs: Optional[Iterable[str]] = None,
        tsconfig_name: Optional[str] = None,
    ) -> None:
        self.root = Path(normalize_path(root))
        if tsconfig is None:
            tsconfig = load_tsconfig(self.root, tsconfig_name or config.TSCONFIG_NAME)
        self.tsconfig = tsconfig
        self.parser = parser or TypeScriptParser()
        self.extensions = frozenset(extensions or config.SUPPORTED_EXTENSIONS)
        self.skip_dirs = frozenset(skip_dirs or config.SKIP_DIRS)
        self._files: Dict[str, SourceFile] = {}

    # ------------------------------------------------------------------
    # File management
    # ------------------------------------------------------------------

    @property
    def source_files(self) -> List[SourceFile]:
        return [self._files[k] for k in sorted(self._files)]

    def add_source_file(self, path: Any, text: Optional[str] = None) -> SourceFile:
        """Parse and register *path*; relative paths are taken from the project root."""
        file_path = Path(str(path))
        if not file_path.is_absolute():
            file_path = self.root / file_path
        key = normalize_path(file_path)
        if text is None:
            text = Path(key).read_text(encoding="utf-8", errors="ignore")
        source_file = self.parser.parse(key, text)
        source_file.project = self
        self._files[key] = source_file
        return source_file

    def add_directory(self, directory: Optional[Any] = None) -> List[SourceFile]:
        base = Path(normalize_path(directory or self.root))
        added: List[SourceFile] = []
        for file_path in sorted(base.rglob("*")):
            if not file_path.is_file() or not self._wanted(file_path):
                continue
            if any(part in self.skip_dirs for part in file_path.relative_to(base).parts):
                continue
            added.append(self.add_source_file(file_path))
        logger.info("Added %d source files from %s", len(added), base)
        return added

    def _wanted(self, file_path: Path) -> bool:
        return file_path.suffix in self.extensions and self.parser.supports(file_path)

    def get_source_file(self, path: Any) -> SourceFile:
        source_file = self.find_source_file(path)
        if source_file is None:
            raise SourceFileNotFoundError(str(path))
        return source_file

    def find_source_file(self, path: Any) -> Optional[SourceFile]:
        file_path = Path(str(path))
        if not file_path.is_absolute():
            file_path = self.root / file_path
        key = normalize_path(file_path)
        if key in self._files:
            return self._files[key]
        if Path(key).is_file() and self.parser.supports(key):
            return self.add_source_file(key)
        return None

    # ------------------------------------------------------------------
    # Module resolution
    # ------------------------------------------------------------------

    def resolve_module(self, importer: SourceFile, specifier: str) -> Optional[SourceFile]:
        """Find the project file *specifier* refers to from *importer*; ``None`` if none."""
        try:
            path_type = get_import_path_type(specifier)
        except ValueError:
            path_type = None

        if path_type is ImportPathType.RELATIVE:
            bases = [Path(importer.file_path).parent / specifier]
        elif path_type is ImportPathType.ABSOLUTE:
            bases = [Path(specifier)]
        elif path_type is ImportPathType.NODE_BUILT_IN:
            return None
        else:
            # aliases, and bare names a tsconfig `paths` entry may map
            bases = alias_candidates(specifier, self.tsconfig, self.root)

        for base in bases:
            found = self._probe(base)
            if found is not None:
                return found
        return None

    def _probe(self, base: Path) -> Optional[SourceFile]:
        text = str(base)
        candidates: List[str] = []
        if base.suffix in LANGUAGE_MAP or text.endswith(".d.ts"):
            candidates.append(text)
        for js_suffix in _JS_SUFFIXES:
            if text.endswith(js_suffix):
                stripped = text[: -len(js_suffix)]
                candidates.extend(stripped + s for s in RESOLUTION_SUFFIXES)
        candidates.extend(text + s for s in RESOLUTION_SUFFIXES)
        candidates.extend(os.path.join(text, "index" + s) for s in RESOLUTION_SUFFIXES)

        for candidate in candidates:
            found = self.find_source_file(candidate)
            if found is not None:
                return found
        return None

    # ------------------------------------------------------------------
    # Symbol resolution
    # ------------------------------------------------------------------

    def resolve_export(
        self,
        source_file: SourceFile,
        exported_name: str,
        _seen: Optional[Set[Tuple[str, str]]] = None,
    ) -> Optional[Resolution]:
        """Follow *exported_name* out of *source_file* to its declaration.

        Looks at direct exports, then export clauses (local or re-exported),
        then ``export *`` targets.  Cycles yield ``None``.
        """
        seen = _seen if _seen is not None else set()
        key = (source_file.file_path, exported_name)
        if key in seen:
            return None
        seen.add(key)

        for decl in source_file.direct_exports:
            if (decl.default and exported_name == "default") or (
                not decl.default and decl.name == exported_name
            ):
                return Resolution(decl, source_file)

        for exp in source_file.exports:
            for spec in exp.named:
                if spec.exported_name != exported_name:
                    continue
                if exp.specifier is None:
                    return self._resolve_local(source_file, spec.name, seen)
                target = self.resolve_module(source_file, exp.specifier)
                if target is None:
                    return None
                return self.resolve_export(target, spec.name, seen)

        if exported_name == "default":
            return None
        for exp in source_file.exports:
            if not exp.wildcard or exp.namespace_alias or exp.specifier is None:
                continue
            target = self.resolve_module(source_file, exp.specifier)
            if target is None:
                continue
            found = self.resolve_export(target, exported_name, seen)
            if found is not None:
                return found
        return None

    def resolve_symbol(self, source_file: SourceFile, local_name: str) -> Optional[Resolution]:
        """Resolve a name as seen inside *source_file* (local declaration or import binding)."""
        return self._resolve_local(source_file, local_name, set())

    def _resolve_local(
        self,
        source_file: SourceFile,
        local_name: str,
        seen: Set[Tuple[str, str]],
    ) -> Optional[Resolution]:
        decl = source_file.declarations.get(local_name)
        if decl is not None:
            return Resolution(decl, source_file)
        binding = self._import_binding(source_file, local_name)
        if binding is None:
            return None
        imp, imported_name = binding
        if imported_name == "*":
            return None
        target = self.resolve_module(source_file, imp.specifier)
        if target is None:
            return None
        return self.resolve_export(target, imported_name, seen)

    @staticmethod
    def _import_binding(
        source_file: SourceFile,
        local_name: str,
    ) -> Optional[Tuple[ImportDeclaration, str]]:
        """The import that binds *local_name* and the name it imports (``*`` for namespaces)."""
        for imp in source_file.imports:
            if imp.default_name == local_name:
                return imp, "default"
            if imp.namespace_name == local_name:
                return imp, "*"
            for spec in imp.named:
                if spec.local_name == local_name:
                    return imp, spec.name
        return None

    def resolve_external(self, source_file: SourceFile, local_name: str) -> Optional[ExternalReference]:
        """Package import binding *local_name*, when it does not resolve into the project."""
        binding = self._import_binding(source_file, local_name)
        if binding is None:
            return None
        imp, imported_name = binding
        if not self.is_external(source_file, imp.specifier):
            return None
        return ExternalReference(imp.specifier, imported_name)

    def is_external(self, importer: SourceFile, specifier: str) -> bool:
        """True for package specifiers: bare names that do not resolve to a project file.

        Relative, absolute and ``@/`` specifiers always name project files, so they are
        never external even when the file is missing.
        """
        if not specifier or is_path_specifier(specifier):
            return False
        return self.resolve_module(importer, specifier) is None

    def require_export(self, source_file: SourceFile, exported_name: str) -> Resolution:
        found = self.resolve_export(source_file, exported_name)
        if found is None:
            raise UnresolvedSymbolError(exported_name, file_path=source_file.file_path)
        return found
