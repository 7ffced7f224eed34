"""Editor module - the user-intent facade over document, selection and history.

Example usage:
    >>> from pagecraft.editor import Editor
    >>> editor = Editor()
    >>> result = editor.add_component("button", x=40, y=40)
    >>> editor.history.labels
    ['initial', 'add']
"""

from .lib import Editor

__all__ = ["Editor"]
