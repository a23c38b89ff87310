"""GutSafe core: hidden-trigger detection and adaptive pattern learning."""

__version__ = "0.1.0"
