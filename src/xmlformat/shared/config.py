"""Configuration classes for XML reformatting.

Every element name maps to an ElementOptions record describing its format
class and its whitespace, indentation, break and wrap settings. Two reserved
pseudo-elements always exist: ``*DOCUMENT`` holds the options of the synthetic
parent of the top-level nodes and ``*DEFAULT`` supplies the options of any
element the configuration does not name. Configured elements are completed
from ``*DEFAULT`` when the configuration is built, so a lookup never has to
check whether a single option is present.

The module also reads the line-oriented configuration file format::

    para, title         # element names, separated by whitespace or commas
      format block
      normalize = yes
      wrap-length 72
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

DOCUMENT_ELEMENT = "*DOCUMENT"
DEFAULT_ELEMENT = "*DEFAULT"


class FormatType(Enum):
    """Format classes an element can be assigned."""

    BLOCK = "block"          # Children broken onto new, indented lines
    INLINE = "inline"        # Stays in the flow of the enclosing block's text
    VERBATIM = "verbatim"    # Subtree emitted unmodified


class BreakType(Enum):
    """Which break-count option governs the next newline emission."""

    ENTRY = "entry-break"
    ELEMENT = "element-break"
    EXIT = "exit-break"


# Option-file names and the ElementOptions field each one sets.
OPTION_FIELDS = {
    "format": "format",
    "normalize": "normalize",
    "subindent": "subindent",
    "wrap-length": "wrap_length",
    "entry-break": "entry_break",
    "exit-break": "exit_break",
    "element-break": "element_break",
}

# Allowed values per option; None means a non-negative integer.
OPTION_VALUES: Dict[str, Optional[List[str]]] = {
    "format": [member.value for member in FormatType],
    "normalize": ["yes", "no"],
    "subindent": None,
    "wrap-length": None,
    "entry-break": None,
    "exit-break": None,
    "element-break": None,
}

# Options shown for each format class by FormatConfig.describe().
_DESCRIBED_OPTIONS = {
    FormatType.BLOCK: [
        "entry-break",
        "element-break",
        "exit-break",
        "subindent",
        "normalize",
        "wrap-length",
    ],
    FormatType.INLINE: [],
    FormatType.VERBATIM: [],
}

_BUILTIN_OPTIONS: Dict[str, Dict[str, Union[str, int]]] = {
    # entry-break 0 keeps blank lines off the top of the output and
    # exit-break 1 guarantees the final newline.
    DOCUMENT_ELEMENT: {
        "format": "block",
        "normalize": "no",
        "subindent": 0,
        "wrap-length": 0,
        "entry-break": 0,
        "exit-break": 1,
        "element-break": 1,
    },
    DEFAULT_ELEMENT: {
        "format": "block",
        "normalize": "no",
        "subindent": 1,
        "wrap-length": 0,
        "entry-break": 1,
        "exit-break": 1,
        "element-break": 1,
    },
}

_COMMENT_RE = re.compile(r"\s*#.*$")
_SKIP_LINE_RE = re.compile(r"^\s*($|#)")
_NAME_SEPARATOR_RE = re.compile(r"[\s,]+")
_OPTION_LINE_RE = re.compile(r"^\s*(\S+)(?:\s+|\s*=\s*)(\S+)$")
_INTEGER_RE = re.compile(r"^\d+$")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


class InvalidOptionName(ConfigValidationError):
    """Raised for an option name outside the recognized set."""


class InvalidOptionValue(ConfigValidationError):
    """Raised for an option value outside the option's domain."""


@dataclass(frozen=True)
class ElementOptions:
    """Fully populated formatting options for one element."""

    format: FormatType
    normalize: bool
    subindent: int
    wrap_length: int
    entry_break: int
    exit_break: int
    element_break: int

    def __post_init__(self) -> None:
        """Validate option values."""
        if not isinstance(self.format, FormatType):
            raise ValueError("format must be a FormatType")
        for name in ("subindent", "wrap_length", "entry_break",
                     "exit_break", "element_break"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

    @property
    def is_block(self) -> bool:
        return self.format == FormatType.BLOCK

    @property
    def is_inline(self) -> bool:
        return self.format == FormatType.INLINE

    @property
    def is_verbatim(self) -> bool:
        return self.format == FormatType.VERBATIM

    def break_count(self, break_type: BreakType) -> int:
        """Number of newlines written for a break of the given type."""
        if break_type == BreakType.ENTRY:
            return self.entry_break
        if break_type == BreakType.ELEMENT:
            return self.element_break
        return self.exit_break

    def to_dict(self) -> Dict[str, Union[str, int]]:
        """Options keyed by their configuration-file names."""
        values: Dict[str, Union[str, int]] = {}
        for option_name, field_name in OPTION_FIELDS.items():
            value = getattr(self, field_name)
            if option_name == "format":
                value = value.value
            elif option_name == "normalize":
                value = "yes" if value else "no"
            values[option_name] = value
        return values

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "ElementOptions":
        """Build options from a complete mapping of checked option values."""
        kwargs = {}
        for option_name, field_name in OPTION_FIELDS.items():
            value = check_option(option_name, values[option_name])
            if option_name == "format":
                value = FormatType(value)
            elif option_name == "normalize":
                value = value == "yes"
            kwargs[field_name] = value
        return cls(**kwargs)


def check_option(name: str, value: Any) -> Union[str, int]:
    """Validate an option name and value, returning the converted value.

    Integer options accept ints or strings of digits; the others accept one
    of the strings listed in OPTION_VALUES.

    Raises:
        InvalidOptionName: if the option is not recognized
        InvalidOptionValue: if the value is outside the option's domain
    """
    if name not in OPTION_VALUES:
        raise InvalidOptionName(
            f"Unknown option name: {name}",
            field_name=name,
            suggestions=sorted(OPTION_VALUES),
        )

    allowed = OPTION_VALUES[name]
    if allowed is not None:
        if value not in allowed:
            raise InvalidOptionValue(
                f"Unknown '{name}' value: {value}",
                field_name=name,
                suggestions=list(allowed),
            )
        return value

    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise InvalidOptionValue(
                f"'{name}' value ({value}) should be a non-negative integer",
                field_name=name,
            )
        return value
    if isinstance(value, str) and _INTEGER_RE.match(value):
        return int(value)
    raise InvalidOptionValue(
        f"'{name}' value ({value}) should be an integer", field_name=name
    )


class FormatConfig:
    """Immutable element-name to ElementOptions mapping.

    The built-in ``*DOCUMENT`` and ``*DEFAULT`` options may be overridden
    option by option; every other element is completed from ``*DEFAULT``.
    """

    def __init__(
        self, elements: Optional[Mapping[str, Mapping[str, Any]]] = None
    ) -> None:
        raw: Dict[str, Dict[str, Any]] = {
            name: dict(options) for name, options in _BUILTIN_OPTIONS.items()
        }
        for name, options in (elements or {}).items():
            target = raw.setdefault(name, {})
            for option_name, value in options.items():
                target[option_name] = check_option(option_name, value)

        default_raw = raw[DEFAULT_ELEMENT]
        self._options: Dict[str, ElementOptions] = {}
        for name, options in raw.items():
            completed = dict(default_raw)
            completed.update(options)
            try:
                self._options[name] = ElementOptions.from_dict(completed)
            except ValueError as e:
                raise ConfigValidationError(f"{name}: {e}", field_name=name) from e

        if not self._options[DOCUMENT_ELEMENT].is_block:
            raise ConfigValidationError(
                f"{DOCUMENT_ELEMENT} must use block format",
                field_name="format",
            )

    @classmethod
    def from_mapping(
        cls, elements: Mapping[str, Mapping[str, Any]]
    ) -> "FormatConfig":
        """Create configuration from an already-parsed element mapping."""
        return cls(elements)

    @classmethod
    def from_text(cls, text: str, source: str = "<string>") -> "FormatConfig":
        """Create configuration from configuration-file text."""
        return cls(parse_config_text(text, source))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "FormatConfig":
        """Create configuration from a configuration file."""
        return load_config_file(path)

    def get(self, name: str) -> Optional[ElementOptions]:
        """Options configured for an element, or None if it is not named."""
        return self._options.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._options

    def __len__(self) -> int:
        return len(self._options)

    @property
    def element_names(self) -> List[str]:
        return sorted(self._options)

    @property
    def document_options(self) -> ElementOptions:
        return self._options[DOCUMENT_ELEMENT]

    @property
    def default_options(self) -> ElementOptions:
        return self._options[DEFAULT_ELEMENT]

    def to_dict(self) -> Dict[str, Dict[str, Union[str, int]]]:
        """Complete configuration keyed by element name."""
        return {name: self._options[name].to_dict() for name in self.element_names}

    def describe(self) -> str:
        """Render the configuration listing shown by ``--show-config``.

        Each element is listed with its format and then the options that
        apply to that format class.
        """
        lines = []
        for name in self.element_names:
            options = self._options[name]
            values = options.to_dict()
            lines.append(name)
            lines.append(f"  format = {options.format.value}")
            for option_name in _DESCRIBED_OPTIONS[options.format]:
                lines.append(f"  {option_name} = {values[option_name]}")
            lines.append("")
        return "\n".join(lines) + "\n"


def parse_config_text(
    text: str, source: str = "<string>"
) -> Dict[str, Dict[str, Union[str, int]]]:
    """Parse configuration-file text into an element to options mapping.

    Lines that start in column one list element names; a trailing backslash
    continues the list on the next line. Indented lines set an option for
    every element of the most recent list. ``#`` starts a comment.

    Raises:
        ConfigError: for structural problems, prefixed with ``source:line:``
        InvalidOptionName, InvalidOptionValue: for bad options, same prefix
    """
    elements: Dict[str, Dict[str, Union[str, int]]] = {}
    element_names: Optional[List[str]] = None
    saved_line = ""
    in_continuation = False

    for line_number, line in enumerate(text.splitlines(), start=1):
        if _SKIP_LINE_RE.match(line):
            continue
        if in_continuation:
            line = saved_line + " " + line
            saved_line = ""
            in_continuation = False

        if not line[0].isspace():
            if line.endswith("\\"):
                in_continuation = True
                saved_line = line[:-1]
                continue
            line = _COMMENT_RE.sub("", line)
            element_names = [
                name for name in _NAME_SEPARATOR_RE.split(line) if name
            ]
            for name in element_names:
                elements.setdefault(name, {})
            continue

        if element_names is None:
            raise ConfigError(
                f"{source}:{line_number}: Option setting found before any "
                "elements were named."
            )
        line = _COMMENT_RE.sub("", line)
        match = _OPTION_LINE_RE.match(line)
        if match is None:
            raise ConfigError(f"{source}:{line_number}: Malformed line: {line}")
        option_name, value = match.group(1), match.group(2)
        try:
            checked = check_option(option_name, value)
        except ConfigValidationError as e:
            raise type(e)(
                f"{source}:{line_number}: {e}",
                field_name=e.field_name,
                suggestions=e.suggestions,
            ) from e
        for name in element_names:
            elements[name][option_name] = checked

    return elements


def load_config_file(path: Union[str, Path]) -> FormatConfig:
    """Read a configuration file and build the FormatConfig it describes."""
    config_path = Path(path)
    if config_path.is_dir():
        raise ConfigError(f"Configuration file '{config_path}' is a directory.")
    try:
        text = config_path.read_text()
    except OSError as e:
        raise ConfigError(
            f"Configuration file '{config_path}' is not readable."
        ) from e
    return FormatConfig(parse_config_text(text, str(config_path)))

