"""Error taxonomy for the mask -> translate -> reinject pipeline"""


class MdxlateError(Exception):
    """Base class for all mdxlate errors."""


class ConfigError(MdxlateError, ValueError):
    """Required run parameters are missing; fatal for the whole run."""


class FormatError(MdxlateError, ValueError):
    """Source document fails structural preconditions (front matter, markers)."""


class TranslationError(MdxlateError, RuntimeError):
    """Translation collaborator failed or returned an unusable result."""


class ReinjectionError(MdxlateError, ValueError):
    """Masked/translated round trip was broken.

    snippet_id names the offending token when it can be identified;
    excerpt holds the surrounding text for diagnosis.
    """

    def __init__(self, message: str, snippet_id: str = None, excerpt: str = None):
        super().__init__(message)
        self.snippet_id = snippet_id
        self.excerpt = excerpt

    def __str__(self) -> str:
        msg = super().__str__()
        if self.snippet_id:
            msg += f" [snippet {self.snippet_id}]"
        if self.excerpt:
            msg += f" near {self.excerpt!r}"
        return msg


class CorruptHeaderError(ReinjectionError):
    """Restored text does not start with a front-matter delimiter."""


class LeakedMarkerError(ReinjectionError):
    """A protection marker survived reinjection, or a snippet token went missing."""
