"""Temporary injection of DSL keywords into the builtins scope.

Every Python module resolves unknown names through the `builtins`
module, so binding the DSL keywords there makes `Given(...)` and
friends callable from glue files without any import.

The injector remembers what each keyword was bound to before the load
and puts it back afterwards. Keywords that did not exist are deleted,
not left behind as `None`.
"""

import builtins
import logging
from typing import TYPE_CHECKING, Any, Final
from warnings import warn

from pytest_cuke.errors import GlueWarning

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

#: Keywords bound to the step registration callback.
STEP_KEYWORDS: Final = ('Given', 'When', 'Then', 'And', 'But')

#: Keywords bound to the before-hook registration callback.
BEFORE_KEYWORDS: Final = ('Before',)

#: Keywords bound to the after-hook registration callback.
AFTER_KEYWORDS: Final = ('After',)


class _Missing:
    """Marker for a keyword with no binding in builtins."""

    def __repr__(self) -> str:
        return '<missing>'


MISSING: Final = _Missing()


class GlobalsInjector:
    """Saved global state of a single load.

    Attributes:
        saved: Pre-load value of every installed keyword, `MISSING`
            for keywords that had no binding.
    """

    def __init__(self, scope: Any = builtins) -> None:  # noqa: ANN401
        """Initialize an injector.

        Args:
            scope: Namespace object to patch, `builtins` unless a test
                substitutes another module.
        """
        self.scope = scope
        self.saved: dict[str, Any] = {}

    def install(self, keywords: 'Iterable[str]', callback: 'Callable[..., Any]') -> None:
        """Bind each keyword to the callback.

        May be called several times within one load. Later calls win for
        overlapping keywords, while the saved value stays the one found
        before the first installation.

        Args:
            keywords: Keyword names to bind.
            callback: Registration callback to bind them to.
        """
        for keyword in keywords:
            if keyword not in self.saved:
                current = getattr(self.scope, keyword, MISSING)
                if current is not MISSING:
                    warn(
                        f'Keyword {keyword!r} is shadowing an existing global binding',
                        category=GlueWarning,
                        stacklevel=2,
                    )
                self.saved[keyword] = current

            setattr(self.scope, keyword, callback)
            logger.debug('Installed keyword %r', keyword)

    def restore(self) -> None:
        """Put every installed keyword back to its pre-load state.

        Keywords that were not bound before are removed. The saved state
        is discarded, so calling this twice is harmless.
        """
        for keyword, value in self.saved.items():
            if value is MISSING:
                if hasattr(self.scope, keyword):
                    delattr(self.scope, keyword)
            else:
                setattr(self.scope, keyword, value)
            logger.debug('Restored keyword %r', keyword)

        self.saved = {}
