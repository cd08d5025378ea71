# File: nestgen/emitters.py
"""
nestgen - Artifact Emitters
===========================
Turns classified graph nodes into TypeScript source text for a NestJS /
TypeORM service:

    1. Storage entities (``@Entity()`` classes with columns and relations)
    2. Read-models (``<Name>Model`` classes with Swagger property decorators)
    3. Module descriptors (``@Module({...})``)
    4. CRUD services (``TypeOrmCrudService<Entity>`` subclasses)
    5. CRUD controllers (``@Crud({...})`` classes)
    6. Interfaces, enums and annotation types

Every ``emit_*`` method is a deterministic function of (node, relation
index, options) and returns the file content; writing it to disk is the
dispatcher's job.  Member, import and relation order follow declaration
order.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple

from nestgen.errors import PreconditionViolation
from nestgen.graph import (
    AssociationEnd,
    Attribute,
    ClassNode,
    Enumeration,
    Generalization,
    Interface,
    Node,
    Operation,
    RelationIndex,
)
from nestgen.models import GenerationOptions, RenderMode, Role, Visibility
from nestgen.naming import (
    VOID_TYPE,
    class_type_name,
    classify_role,
    default_return_literal,
    is_optional,
    is_tree_association,
    resolve_member_name,
    resolve_type,
    tree_member_name,
)
from nestgen.paths import enclosing_module_name, import_path
from nestgen.relations import (
    CRUD_BASE_SERVICE,
    Relation,
    associated_classes,
    bound_entity,
    crud_generalization,
    relations_of,
    tree_association_of,
)
from nestgen.utils import (
    capitalize,
    count_lines,
    to_camel_case,
    to_kebab_case,
    to_plural,
    to_snake_case,
)
from nestgen.writer import CodeWriter

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.emitters")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TYPEORM: str = "typeorm"
NEST_TYPEORM: str = "@nestjs/typeorm"
NEST_SWAGGER: str = "@nestjs/swagger"
NESTJSX_CRUD: str = "@nestjsx/crud"
NESTJSX_CRUD_TYPEORM: str = "@nestjsx/crud-typeorm"

DEFAULT_TREE_TYPE: str = "materialized-path"
STUB_BODY: str = "// TODO implement here"

_VISIBILITY_KEYWORDS = {
    Visibility.PUBLIC: "public",
    Visibility.PROTECTED: "protected",
    Visibility.PRIVATE: "private",
}

_DECIMAL_RE: re.Pattern[str] = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


# ---------------------------------------------------------------------------
# Column helpers
# ---------------------------------------------------------------------------


def _default_literal(text: str) -> str:
    """Render a declared default value as a column-option literal."""
    if text.lower() in ("true", "false"):
        return text.lower()
    stripped: str = text.strip()
    if _DECIMAL_RE.match(stripped):
        value: float = float(stripped)
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return text


def column_options(attr: Attribute) -> List[Tuple[str, str]]:
    """``(key, literal)`` pairs for a column decorator, in emission order."""
    options: List[Tuple[str, str]] = []
    if is_optional(attr.name):
        options.append(("nullable", "true"))
    if attr.default_value:
        options.append(("default", _default_literal(attr.default_value)))
    return options


def _method_doc(operation: Operation) -> str:
    kept: List[str] = [
        line
        for line in operation.documentation.strip().split("\n")
        if not line.startswith(("@param", "@return"))
    ]
    doc: str = "\n".join(kept)
    for param in operation.input_parameters:
        doc += f"\n@param {param.name} {param.documentation}"
    returned = operation.return_parameter
    if returned is not None:
        doc += f"\n@return {returned.documentation}"
    return doc


# ---------------------------------------------------------------------------
# Emitter
# ---------------------------------------------------------------------------


class ArtifactEmitter:
    """
    Source-text emitter for every artifact kind.

    Usage::

        emitter = ArtifactEmitter(options, graph.relations)
        entity_ts = emitter.emit_entity(order)
        model_ts = emitter.emit_model(order)
    """

    def __init__(self, options: GenerationOptions, relations: RelationIndex) -> None:
        self._options: GenerationOptions = options
        self._relations: RelationIndex = relations

    # ======================================================================
    # Shared building blocks
    # ======================================================================

    def _new_writer(self) -> CodeWriter:
        return CodeWriter(self._options.indent_unit)

    def _write_doc(self, writer: CodeWriter, text: Optional[str]) -> None:
        if not self._options.include_doc_comments:
            return
        text = (text or "").strip()
        if not text:
            return
        writer.write_line("/**")
        for line in text.split("\n"):
            writer.write_line(f" * {line}".rstrip())
        writer.write_line(" */")

    def _class_doc(self, node: Node) -> str:
        doc: str = node.documentation.strip()
        if self._options.author:
            doc += f"\n@author {self._options.author}"
        return doc

    @staticmethod
    def _modifiers(node: Node, *, readonly: bool = True) -> List[str]:
        modifiers: List[str] = []
        keyword: Optional[str] = _VISIBILITY_KEYWORDS.get(node.visibility)
        if keyword:
            modifiers.append(keyword)
        if getattr(node, "is_static", False):
            modifiers.append("static")
        if getattr(node, "is_abstract", False):
            modifiers.append("abstract")
        if readonly and getattr(node, "is_leaf", False):
            modifiers.append("readonly")
        return modifiers

    def _heritage(self, cls: Node) -> List[str]:
        terms: List[str] = []
        superclasses: List[ClassNode] = self._relations.superclasses(cls)
        if superclasses:
            terms.append(f"extends {superclasses[0].name}")
        interfaces: List[ClassNode] = self._relations.interfaces(cls)
        if interfaces:
            terms.append("implements " + ", ".join(i.name for i in interfaces))
        return terms

    def _class_header(self, cls: ClassNode, name: str, *, export: bool = True) -> str:
        terms: List[str] = ["export"] if export else []
        if cls.is_abstract or any(op.is_abstract for op in cls.operations):
            terms.append("abstract")
        terms.extend(["class", name])
        terms.extend(self._heritage(cls))
        return " ".join(terms) + " {"

    def _write_member(
        self,
        writer: CodeWriter,
        node: Node,
        *,
        mode: RenderMode = RenderMode.ENTITY,
        bare: bool = False,
    ) -> None:
        """``[modifiers] name: type[ = default];``; unnamed members are skipped."""
        if isinstance(node, AssociationEnd) and is_tree_association(node.parent):
            name: str = tree_member_name(node)
        else:
            name = resolve_member_name(node)
        if not name:
            logger.debug("Skipping unnamed %s member.", node.kind.value)
            return

        terms: List[str] = [] if bare else self._modifiers(node)
        terms.append(f"{name}:")
        terms.append(resolve_type(node, mode))
        default: str = getattr(node, "default_value", "")
        if default:
            terms.append(f"= {default}")
        writer.write_line(" ".join(terms) + ";")

    def _write_method(
        self,
        writer: CodeWriter,
        operation: Operation,
        *,
        skip_body: bool = False,
        skip_params: bool = False,
        bare: bool = False,
        concrete: bool = False,
    ) -> None:
        """
        Method stub ``[modifiers] name(p: T): R { ... }``.

        Abstract methods and *skip_body* render as a bodiless signature;
        *concrete* drops the ``abstract`` modifier (inherited stubs).
        """
        if not operation.name:
            logger.debug("Skipping unnamed operation.")
            return

        self._write_doc(writer, _method_doc(operation))

        modifiers: List[str] = [] if bare else self._modifiers(operation, readonly=False)
        if concrete and "abstract" in modifiers:
            modifiers.remove("abstract")

        params: str = ""
        if not skip_params:
            params = ", ".join(
                f"{p.name}: {resolve_type(p)}" for p in operation.input_parameters
            )
        returned = operation.return_parameter
        return_type: str = resolve_type(returned) if returned is not None else VOID_TYPE
        signature: str = " ".join(modifiers + [f"{operation.name}({params}): {return_type}"])

        if skip_body or "abstract" in modifiers:
            writer.write_line(signature + ";")
            return

        writer.write_line(signature + " {")
        writer.indent()
        writer.write_line(STUB_BODY)
        if returned is not None:
            writer.write_line(f"return {default_return_literal(return_type)};")
        writer.outdent()
        writer.write_line("}")

    def _write_operations(self, writer: CodeWriter, cls: ClassNode) -> None:
        """Own operations, inherited abstract operations, then interface operations."""
        for operation in cls.operations:
            self._write_method(writer, operation)
            writer.write_line()

        self._write_inherited_stubs(writer, cls)

        for interface in self._relations.interfaces(cls):
            for operation in interface.operations:
                self._write_method(writer, operation, concrete=True)
                writer.write_line()

    def _write_inherited_stubs(self, writer: CodeWriter, cls: ClassNode) -> None:
        """Abstract operations of the first superclass, as concrete stubs."""
        superclasses: List[ClassNode] = self._relations.superclasses(cls)
        if not superclasses:
            return
        for operation in superclasses[0].operations:
            if operation.is_abstract:
                self._write_method(writer, operation, concrete=True)
                writer.write_line()

    def _write_nested(self, writer: CodeWriter, cls: ClassNode) -> None:
        for child in cls.children:
            if isinstance(child, Enumeration):
                self._write_enum(writer, child, export=False)
            elif isinstance(child, Interface):
                self._write_interface(writer, child, export=False)
            elif isinstance(child, ClassNode):
                if classify_role(child) is Role.ANNOTATION_TYPE:
                    self._write_annotation_type(writer, child, export=False)
                else:
                    self._write_class(writer, child)
            else:
                continue
            writer.write_line()

    def _write_class(self, writer: CodeWriter, cls: ClassNode) -> None:
        """Plain nested class: members, navigable ends and operations."""
        if not cls.name:
            logger.debug("Skipping unnamed nested class.")
            return
        self._write_doc(writer, self._class_doc(cls))
        writer.write_line(self._class_header(cls, cls.name, export=False))
        writer.write_line()
        writer.indent()

        for attr in cls.attributes:
            self._write_member(writer, attr)
            writer.write_line()
        for relation in relations_of(cls, self._relations):
            self._write_member(writer, relation.target)
            writer.write_line()

        self._write_operations(writer, cls)
        self._write_nested(writer, cls)
        writer.outdent()
        writer.write_line("}")

    # ======================================================================
    # 1. Storage entity
    # ======================================================================

    def _write_column(self, writer: CodeWriter, attr: Attribute) -> None:
        module: str = TYPEORM
        if attr.is_id:
            decorator: str = "PrimaryGeneratedColumn" if attr.is_derived else "PrimaryColumn"
        elif isinstance(attr.stereotype, ClassNode) and attr.stereotype.name:
            decorator = attr.stereotype.name
            module = import_path(attr, attr.stereotype)
        else:
            decorator = "Column"
        writer.add_import(decorator, module)

        options: List[Tuple[str, str]] = column_options(attr)
        declared = attr.type
        if options:
            rendered: str = ", ".join(f"{key}: {value}" for key, value in options)
            writer.write_line(f"@{decorator}({{ {rendered} }})")
        elif isinstance(declared, Node) and declared.name:
            writer.add_import(declared.name, import_path(attr, declared))
            writer.write_line(f"@{decorator}(type => {declared.name})")
        else:
            writer.write_line(f"@{decorator}()")

        self._write_member(writer, attr)

    def _write_entity_relation(self, writer: CodeWriter, relation: Relation) -> None:
        kind: str = relation.kind.value
        writer.add_import(kind, TYPEORM)

        if relation.is_tree:
            writer.write_line(f"@{kind}()")
        else:
            target: ClassNode = relation.target_class
            if relation.source.navigable:
                param: str = relation.parameter
                writer.write_line(
                    f"@{kind}(type => {target.name}, {param} => {param}.{relation.back_reference})"
                )
            else:
                writer.write_line(f"@{kind}(type => {target.name})")

            if relation.join:
                writer.add_import(relation.join, TYPEORM)
                writer.write_line(f"@{relation.join}()")
            if not relation.is_self_relation:
                writer.add_import(target.name, import_path(relation.source.reference, target))

        self._write_member(writer, relation.target)
        writer.write_line()

    def emit_entity(self, cls: ClassNode) -> str:
        """Storage-entity file for an Entity (or ``fields``) class."""
        writer: CodeWriter = self._new_writer()
        self._write_doc(writer, self._class_doc(cls))

        if classify_role(cls) is Role.ENTITY:
            writer.add_import(cls.stereotype.name, import_path(cls, cls.stereotype))
            if self._options.table_prefix:
                writer.write_line(
                    f"@Entity('{self._options.table_prefix}_{to_snake_case(cls.name)}')"
                )
            else:
                writer.write_line("@Entity()")

        tree = tree_association_of(cls, self._relations)
        if tree is not None:
            tree_type: str = tree.name or DEFAULT_TREE_TYPE
            writer.add_import(tree.stereotype.name, import_path(cls, tree.stereotype))
            writer.write_line(f"@{tree.stereotype.name}('{tree_type}')")

        writer.write_line(self._class_header(cls, cls.name))
        writer.write_line()
        writer.indent()

        # --- Columns ---
        for attr in cls.attributes:
            self._write_column(writer, attr)
            writer.write_line()

        # --- Relations ---
        for relation in relations_of(cls, self._relations):
            self._write_entity_relation(writer, relation)

        self._write_operations(writer, cls)
        self._write_nested(writer, cls)
        writer.outdent()
        writer.write_line("}")

        content: str = writer.render()
        logger.debug("Generated entity for '%s': %d lines.", cls.name, count_lines(content))
        return content

    # ======================================================================
    # 2. Read-model
    # ======================================================================

    @staticmethod
    def _write_api_property(writer: CodeWriter, name: str) -> None:
        decorator: str = "ApiModelPropertyOptional" if is_optional(name) else "ApiModelProperty"
        writer.add_import(decorator, NEST_SWAGGER)
        writer.write_line(f"@{decorator}()")

    def _write_model_relation(self, writer: CodeWriter, relation: Relation) -> None:
        target: ClassNode = relation.target_class
        if not relation.is_self_relation:
            writer.add_import(
                class_type_name(target, RenderMode.MODEL),
                import_path(relation.source.reference, target, RenderMode.MODEL, RenderMode.MODEL),
            )
        self._write_api_property(writer, resolve_member_name(relation.target))
        self._write_member(writer, relation.target, mode=RenderMode.MODEL)
        writer.write_line()

    def emit_model(self, cls: ClassNode) -> str:
        """Read-model file for an Entity (or ``fields``) class."""
        writer: CodeWriter = self._new_writer()
        self._write_doc(writer, self._class_doc(cls))

        if classify_role(cls) is Role.FIELDS:
            name: str = cls.name
        else:
            name = class_type_name(cls, RenderMode.MODEL)
        writer.write_line(self._class_header(cls, name))
        writer.write_line()
        writer.indent()

        # --- Properties ---
        for attr in cls.attributes:
            declared = attr.type
            if isinstance(declared, Node) and declared.name:
                target_mode: RenderMode = (
                    RenderMode.MODEL
                    if classify_role(declared) is Role.FIELDS
                    else RenderMode.ENTITY
                )
                writer.add_import(
                    declared.name,
                    import_path(attr, declared, RenderMode.MODEL, target_mode),
                )
            self._write_api_property(writer, attr.name)
            self._write_member(writer, attr)
            writer.write_line()

        # --- Relations ---
        for relation in relations_of(cls, self._relations):
            self._write_model_relation(writer, relation)

        self._write_operations(writer, cls)
        self._write_nested(writer, cls)
        writer.outdent()
        writer.write_line("}")

        content: str = writer.render()
        logger.debug("Generated read-model for '%s': %d lines.", cls.name, count_lines(content))
        return content

    # ======================================================================
    # 3. Module descriptor
    # ======================================================================

    def _write_section(self, writer: CodeWriter, key: str, members: Sequence[Node]) -> None:
        writer.write_line(f"{key}: [")
        writer.indent()
        for member in members:
            writer.write_line(f"{member.name},")
        writer.outdent()
        writer.write_line("],")

    def emit_module(
        self,
        package: Node,
        *,
        entities: Sequence[ClassNode] = (),
        services: Sequence[ClassNode] = (),
        controllers: Sequence[ClassNode] = (),
    ) -> str:
        """
        Module descriptor for *package* listing the artifacts registered
        beneath it.  Empty sections are omitted.
        """
        writer: CodeWriter = self._new_writer()
        self._write_doc(writer, self._class_doc(package))

        if isinstance(package.stereotype, ClassNode):
            writer.add_import(package.stereotype.name, import_path(package, package.stereotype))
        writer.add_import("TypeOrmModule", NEST_TYPEORM)
        for member in (*entities, *services, *controllers):
            writer.add_import(member.name, import_path(package, member))

        writer.write_line("@Module({")
        writer.indent()
        if entities:
            writer.write_line("imports: [")
            writer.indent()
            writer.write_line("TypeOrmModule.forFeature([")
            writer.indent()
            for entity in entities:
                writer.write_line(f"{entity.name},")
            writer.outdent()
            writer.write_line("]),")
            writer.outdent()
            writer.write_line("],")
        if services:
            self._write_section(writer, "providers", services)
        if controllers:
            self._write_section(writer, "controllers", controllers)
        writer.outdent()
        writer.write_line("})")

        terms: List[str] = ["export", "class", capitalize(to_camel_case(package.name)) + "Module"]
        terms.extend(self._heritage(package))
        writer.write_line(" ".join(terms) + " {")
        writer.write_line()
        writer.write_line("}")

        content: str = writer.render()
        logger.debug(
            "Generated module '%s': %d entities, %d services, %d controllers.",
            package.name,
            len(entities),
            len(services),
            len(controllers),
        )
        return content

    # ======================================================================
    # 4. CRUD service
    # ======================================================================

    def emit_service(self, cls: ClassNode) -> str:
        """
        CRUD service extending ``TypeOrmCrudService<Entity>``.

        Raises:
            PreconditionViolation: If *cls* does not generalize the CRUD base
                service or that generalization names no entity.
        """
        generalization: Optional[Generalization] = crud_generalization(cls, self._relations)
        if generalization is None:
            raise PreconditionViolation(
                cls.name, f"service does not generalize {CRUD_BASE_SERVICE}."
            )
        entity = generalization.stereotype
        if not isinstance(entity, ClassNode):
            raise PreconditionViolation(
                cls.name, f"{CRUD_BASE_SERVICE} generalization has no entity stereotype."
            )

        writer: CodeWriter = self._new_writer()
        self._write_doc(writer, self._class_doc(cls))

        writer.add_import(entity.name, import_path(cls, entity))
        writer.add_import(cls.stereotype.name, import_path(cls, cls.stereotype))
        writer.add_import("InjectRepository", NEST_TYPEORM)
        writer.add_import(CRUD_BASE_SERVICE, NESTJSX_CRUD_TYPEORM)

        writer.write_line("@Injectable()")
        writer.write_line(
            f"export class {cls.name} extends {generalization.target.name}<{entity.name}> {{"
        )
        writer.indent()
        writer.write_line(f"constructor(@InjectRepository({entity.name}) repo) {{")
        writer.indent()
        writer.write_line("super(repo);")
        writer.outdent()
        writer.write_line("}")
        writer.outdent()
        writer.write_line("}")

        content: str = writer.render()
        logger.debug("Generated service '%s' bound to '%s'.", cls.name, entity.name)
        return content

    # ======================================================================
    # 5. CRUD controller
    # ======================================================================

    def emit_controller(self, cls: ClassNode) -> str:
        """
        CRUD controller bound to the entity of its primary service.

        The primary service is the first associated service, in declaration
        order, that generalizes the CRUD base service with an entity.

        Raises:
            PreconditionViolation: If no associated service is CRUD-bound.
        """
        services: List[ClassNode] = associated_classes(cls, self._relations)
        primary: Optional[ClassNode] = None
        entity: Optional[ClassNode] = None
        for service in services:
            entity = bound_entity(service, self._relations)
            if entity is not None:
                primary = service
                break
        if primary is None or entity is None:
            raise PreconditionViolation(
                cls.name,
                f"no associated service generalizes {CRUD_BASE_SERVICE} with an entity.",
            )

        writer: CodeWriter = self._new_writer()
        self._write_doc(writer, self._class_doc(cls))

        writer.add_import(cls.stereotype.name, import_path(cls, cls.stereotype))
        writer.add_import("Crud", NESTJSX_CRUD)
        writer.add_import("ApiUseTags", NEST_SWAGGER)
        for service in services:
            writer.add_import(service.name, import_path(cls, service))

        model_name: str = class_type_name(entity, RenderMode.MODEL)
        writer.add_import(model_name, import_path(cls, entity, RenderMode.ENTITY, RenderMode.MODEL))

        # --- Decorators ---
        writer.write_line("@Crud({")
        writer.indent()
        writer.write_line("model: {")
        writer.indent()
        writer.write_line(f"type: {model_name},")
        writer.outdent()
        writer.write_line("},")
        writer.outdent()
        writer.write_line("})")
        writer.write_line(f"@ApiUseTags('{enclosing_module_name(cls)}')")
        writer.write_line(f"@Controller('{to_kebab_case(to_plural(entity.name))}')")

        writer.add_import("CrudController", NESTJSX_CRUD)
        writer.write_line(f"export class {cls.name} implements CrudController<{model_name}> {{")
        writer.indent()

        # --- Constructor ---
        if services:
            writer.write_line("constructor(")
            writer.indent()
            for service in services:
                if service is primary:
                    writer.write_line(f"public readonly service: {service.name},")
                else:
                    writer.write_line(
                        f"private readonly {to_camel_case(service.name)}: {service.name},"
                    )
            writer.outdent()
            writer.write_line(") {}")
        else:
            writer.write_line("constructor() {}")

        writer.write_line(f"get base(): CrudController<{model_name}> {{")
        writer.indent()
        writer.write_line("return this;")
        writer.outdent()
        writer.write_line("}")
        writer.outdent()
        writer.write_line("}")

        content: str = writer.render()
        logger.debug(
            "Generated controller '%s' (%d service(s), primary '%s').",
            cls.name,
            len(services),
            primary.name,
        )
        return content

    # ======================================================================
    # 6. Interfaces, enums, annotation types
    # ======================================================================

    def _write_interface(self, writer: CodeWriter, interface: ClassNode, *, export: bool = True) -> None:
        self._write_doc(writer, interface.documentation)

        terms: List[str] = ["export"] if export else []
        terms.extend(["interface", interface.name])
        superclasses: List[ClassNode] = self._relations.superclasses(interface)
        if superclasses:
            terms.append("extends " + ", ".join(s.name for s in superclasses))
        writer.write_line(" ".join(terms) + " {")
        writer.write_line()
        writer.indent()

        for attr in interface.attributes:
            self._write_member(writer, attr, bare=True)
            writer.write_line()
        for relation in relations_of(interface, self._relations):
            self._write_member(writer, relation.target, bare=True)
            writer.write_line()
        for operation in interface.operations:
            self._write_method(writer, operation, skip_body=True, bare=True)
            writer.write_line()

        self._write_nested(writer, interface)
        writer.outdent()
        writer.write_line("}")

    def _write_enum(self, writer: CodeWriter, enum: Enumeration, *, export: bool = True) -> None:
        self._write_doc(writer, enum.documentation)
        prefix: str = "export " if export else ""
        writer.write_line(f"{prefix}enum {enum.name} {{")
        writer.indent()
        last: int = len(enum.literals) - 1
        for position, literal in enumerate(enum.literals):
            writer.write_line(literal.name + ("," if position < last else ""))
        writer.outdent()
        writer.write_line("}")

    def _write_annotation_type(self, writer: CodeWriter, cls: ClassNode, *, export: bool = True) -> None:
        self._write_doc(writer, self._class_doc(cls))
        prefix: str = "export " if export else ""
        writer.write_line(f"{prefix}interface {cls.name} {{")
        writer.write_line()
        writer.indent()
        for attr in cls.attributes:
            self._write_member(writer, attr, bare=True)
            writer.write_line()
        for operation in cls.operations:
            self._write_method(writer, operation, skip_body=True, skip_params=True, bare=True)
            writer.write_line()
        self._write_inherited_stubs(writer, cls)
        self._write_nested(writer, cls)
        writer.outdent()
        writer.write_line("}")

    def emit_interface(self, interface: Interface) -> str:
        writer: CodeWriter = self._new_writer()
        self._write_interface(writer, interface)
        return writer.render()

    def emit_enum(self, enum: Enumeration) -> str:
        writer: CodeWriter = self._new_writer()
        self._write_enum(writer, enum)
        return writer.render()

    def emit_annotation_type(self, cls: ClassNode) -> str:
        writer: CodeWriter = self._new_writer()
        self._write_annotation_type(writer, cls)
        return writer.render()


__all__: List[str] = [
    "TYPEORM",
    "NEST_TYPEORM",
    "NEST_SWAGGER",
    "NESTJSX_CRUD",
    "NESTJSX_CRUD_TYPEORM",
    "DEFAULT_TREE_TYPE",
    "column_options",
    "ArtifactEmitter",
]

logger.debug("nestgen.emitters loaded.")
