"""Per-document option resolution.

Elements the configuration does not name are formatted with the ``*DEFAULT``
options. The resolver records each such name the first time it is seen so
that the caller can report them, and memoizes the binding so the lookup miss
happens only once per name.
"""

from typing import Dict, Set

from xmlformat.shared import ElementOptions, FormatConfig


class OptionResolver:
    """Resolves element names to options for the lifetime of one document."""

    def __init__(self, config: FormatConfig) -> None:
        self.config = config
        self._defaulted: Dict[str, ElementOptions] = {}

    def resolve(self, name: str) -> ElementOptions:
        """Return the options for an element name, defaulting if unconfigured."""
        options = self.config.get(name)
        if options is not None:
            return options
        options = self._defaulted.get(name)
        if options is None:
            options = self._defaulted[name] = self.config.default_options
        return options

    def unconfigured_names(self) -> Set[str]:
        """Names resolved since the last reset that had no configuration."""
        return set(self._defaulted)

    def reset(self) -> None:
        """Forget names defaulted while processing a previous document."""
        self._defaulted.clear()
