"""Message compilation and rendering.

MessageFormatter turns template text into a CompiledMessage (through a
content-addressed cache) and renders compiled messages against a
RenderContext. Rendering is a pure recursive walk over the immutable tree:
no state is shared between renders apart from the caches, so concurrent
renders of one message cannot interfere.

Python 3.13+. Depends on Babel (through the value formatter and plural rules).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType

from localekit.constants import MAX_DEPTH
from localekit.diagnostics import (
    ErrorTemplate,
    FormatError,
    MissingArgumentError,
)
from localekit.enums import ArgumentType, PluralCategory, ValueKind
from localekit.formatting.locale_context import BabelValueFormatter, ValueFormatter
from localekit.locales.tag import LocaleTag, as_locale_tag
from localekit.message.ast import (
    Argument,
    ChoiceClause,
    CompiledMessage,
    Literal,
    Pattern,
    PluralClause,
    PoundSign,
    SelectClause,
)
from localekit.message.cache import MessageCache
from localekit.message.parser import parse_template
from localekit.message.values import classify, selector_text, to_decimal
from localekit.plural.rules import PluralNumber, PluralRuleEngine, to_plural_operand

__all__ = ["MessageFormatter", "RenderContext"]

_BARE_DATE_STYLE = "short"


def _freeze_args(args: Mapping[str | int, object] | None) -> Mapping[str, object]:
    # Positional arguments may be passed with int keys ({0: "x"})
    return MappingProxyType({str(name): value for name, value in (args or {}).items()})


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Locale and arguments of one render.

    Attributes:
        locale: Locale used for plural selection and value formatting
        args: Argument values by name; read-only during the render
    """

    locale: LocaleTag
    args: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", _freeze_args(self.args))

    @classmethod
    def of(
        cls, locale: LocaleTag | str, args: Mapping[str | int, object] | None = None
    ) -> RenderContext:
        """Build a context from a locale string or tag."""
        return cls(as_locale_tag(locale), _freeze_args(args))


def _subtract_offset(value: PluralNumber, offset: Decimal) -> PluralNumber:
    if not offset:
        return value
    if isinstance(value, Decimal):
        return value - offset
    if isinstance(value, float):
        return value - float(offset)
    if offset == offset.to_integral_value():
        return value - int(offset)
    return Decimal(value) - offset


class MessageFormatter:
    """Compile and render ICU MessageFormat templates.

    Args:
        plural_rules: Plural category engine (default: Babel CLDR rules)
        value_formatter: Number/date/time formatter (default: Babel)
        cache: Compiled-message cache (default: a new MessageCache)
        max_depth: Maximum clause nesting accepted by compile()

    Example:
        >>> formatter = MessageFormatter()
        >>> formatter.format(
        ...     "{n, plural, =0{No files} one{# file} other{# files}}", "en", {"n": 1200}
        ... )
        '1,200 files'
        >>> formatter.format("{g, select, female{She} other{They}} replied", "en", {"g": "x"})
        'They replied'
    """

    __slots__ = ("_cache", "_max_depth", "_plural_rules", "_values")

    def __init__(
        self,
        *,
        plural_rules: PluralRuleEngine | None = None,
        value_formatter: ValueFormatter | None = None,
        cache: MessageCache | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        self._plural_rules = plural_rules if plural_rules is not None else PluralRuleEngine()
        self._values = value_formatter if value_formatter is not None else BabelValueFormatter()
        self._cache = cache if cache is not None else MessageCache()
        self._max_depth = max_depth

    @property
    def cache(self) -> MessageCache:
        """Compiled-message cache."""
        return self._cache

    @property
    def plural_rules(self) -> PluralRuleEngine:
        """Plural category engine."""
        return self._plural_rules

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compile(self, template: str) -> CompiledMessage:
        """Compile a template, reusing the cached result when available.

        Raises:
            TemplateSyntaxError: If the template is malformed
        """
        return self._cache.get_or_compile(template, self._compile)

    def _compile(self, template: str) -> CompiledMessage:
        return parse_template(template, max_depth=self._max_depth)

    def render(self, compiled: CompiledMessage, context: RenderContext) -> str:
        """Render a compiled message.

        Raises:
            MissingArgumentError: If a referenced argument is absent
            FormatError: If a value does not fit its placeholder
        """
        if compiled.is_literal:
            return "".join(part.text for part in compiled.parts if isinstance(part, Literal))
        out: list[str] = []
        self._render_into(out, compiled.parts, context, None)
        return "".join(out)

    def format(
        self,
        template: str,
        locale: LocaleTag | str,
        args: Mapping[str | int, object] | None = None,
    ) -> str:
        """Compile (cached) and render in one call."""
        return self.render(self.compile(template), RenderContext.of(locale, args))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_into(
        self,
        out: list[str],
        pattern: Pattern,
        ctx: RenderContext,
        pound: PluralNumber | None,
    ) -> None:
        for part in pattern:
            match part:
                case Literal(text=text):
                    out.append(text)
                case PoundSign():
                    if pound is None:
                        out.append("#")
                    else:
                        out.append(self._format("#", ctx, self._values.format_number, pound, None))
                case Argument():
                    out.append(self._render_argument(part, ctx))
                case PluralClause():
                    self._render_plural(out, part, ctx)
                case SelectClause():
                    self._render_select(out, part, ctx)
                case ChoiceClause():
                    self._render_choice(out, part, ctx)

    def _lookup(self, name: str, ctx: RenderContext) -> object:
        try:
            return ctx.args[name]
        except KeyError:
            raise MissingArgumentError(
                ErrorTemplate.argument_not_provided(name), argument_name=name
            ) from None

    def _mismatch(
        self, name: str, expected: str, kind: ValueKind, ctx: RenderContext
    ) -> FormatError:
        return FormatError(ErrorTemplate.type_mismatch(name, expected, str(kind), str(ctx.locale)))

    def _format[V](
        self,
        name: str,
        ctx: RenderContext,
        func: Callable[[LocaleTag, V, str | None], str],
        value: V,
        style: str | None,
    ) -> str:
        try:
            return func(ctx.locale, value, style)
        except FormatError as e:
            if e.diagnostic is not None:
                raise
            raise FormatError(
                ErrorTemplate.formatting_failed(name, str(e), str(ctx.locale))
            ) from e

    def _render_argument(self, arg: Argument, ctx: RenderContext) -> str:
        value = self._lookup(arg.name, ctx)
        kind = classify(value)
        values = self._values

        match arg.arg_type:
            case ArgumentType.NUMBER:
                if kind != ValueKind.NUMBER:
                    raise self._mismatch(arg.name, "number", kind, ctx)
                return self._format(arg.name, ctx, values.format_number, value, arg.style)
            case ArgumentType.DATE:
                if kind not in (ValueKind.DATE, ValueKind.DATETIME):
                    raise self._mismatch(arg.name, "date", kind, ctx)
                return self._format(arg.name, ctx, values.format_date, value, arg.style)
            case ArgumentType.TIME:
                if kind not in (ValueKind.TIME, ValueKind.DATETIME):
                    raise self._mismatch(arg.name, "time", kind, ctx)
                return self._format(arg.name, ctx, values.format_time, value, arg.style)
            case _:
                return self._render_bare(arg.name, value, kind, ctx)

    def _render_bare(self, name: str, value: object, kind: ValueKind, ctx: RenderContext) -> str:
        values = self._values
        match kind:
            case ValueKind.STRING:
                return str(value)
            case ValueKind.NUMBER:
                return self._format(name, ctx, values.format_number, value, None)
            case ValueKind.BOOLEAN:
                return "true" if value else "false"
            case ValueKind.DATE:
                return self._format(name, ctx, values.format_date, value, _BARE_DATE_STYLE)
            case ValueKind.TIME:
                return self._format(name, ctx, values.format_time, value, _BARE_DATE_STYLE)
            case ValueKind.DATETIME:
                return self._format(name, ctx, values.format_datetime, value, _BARE_DATE_STYLE)
            case ValueKind.NONE:
                return ""
            case _:
                raise self._mismatch(name, "a scalar value", kind, ctx)

    def _render_plural(self, out: list[str], clause: PluralClause, ctx: RenderContext) -> None:
        value = to_plural_operand(self._lookup(clause.name, ctx), clause.name)

        # Explicit =K branches match the value before the offset is applied
        branch = clause.explicit_branches.get(to_decimal(value))
        adjusted = _subtract_offset(value, clause.offset)
        if branch is None:
            category = self._plural_rules.category(ctx.locale, adjusted, clause.kind)
            branch = clause.branches.get(category)
            if branch is None:
                branch = clause.branches[PluralCategory.OTHER]

        self._render_into(out, branch, ctx, adjusted)

    def _render_select(self, out: list[str], clause: SelectClause, ctx: RenderContext) -> None:
        value = self._lookup(clause.name, ctx)
        kind = classify(value)
        key = selector_text(value, kind)
        if key is None:
            raise self._mismatch(clause.name, "string, boolean or number", kind, ctx)

        branch = clause.branches.get(key)
        if branch is None:
            branch = clause.default
        if branch is None:
            raise FormatError(ErrorTemplate.no_matching_branch(clause.name, key))

        self._render_into(out, branch, ctx, None)

    def _render_choice(self, out: list[str], clause: ChoiceClause, ctx: RenderContext) -> None:
        value = to_decimal(to_plural_operand(self._lookup(clause.name, ctx), clause.name))

        # Values below the first limit use the first branch
        selected = clause.branches[0]
        for branch in clause.branches:
            if branch.accepts(value):
                selected = branch

        self._render_into(out, selected.pattern, ctx, None)
