"""
Navigation state for one side of the dual-pane view.
"""
from .actions import ActionResult, ActionType
from .lister import ListError, list_directory
from .paths import PathError


class PaneState:
    """Current directory, listing and selection of a single root-confined pane."""

    PAGE_SIZE = 10

    def __init__(self, root, lister=list_directory):
        self.root = root
        self.current = root.path()
        self.entries = ()
        self.selected_index = 0
        self.scroll_offset = 0
        self.error_message = None
        self._lister = lister

    @classmethod
    def open(cls, root, lister=list_directory):
        """Create a pane showing ``root``; raises ListError if it cannot be listed."""
        pane = cls(root, lister=lister)
        pane.entries = pane._lister(pane.current)
        return pane

    @property
    def label(self):
        return self.root.label

    def selected_entry(self):
        if 0 <= self.selected_index < len(self.entries):
            return self.entries[self.selected_index]
        return None

    def selected_path(self):
        """Return the RootedPath of the highlighted entry, or None."""
        entry = self.selected_entry()
        if entry is None:
            return None
        return self.current.child(entry.name)

    def clear_error(self):
        self.error_message = None

    def _fail(self, message):
        self.error_message = message
        return ActionResult(ActionType.ERROR, message)

    def _select_name(self, name):
        for i, entry in enumerate(self.entries):
            if entry.name == name:
                self.selected_index = i
                return True
        return False

    def _clamp_selection(self):
        if self.entries:
            self.selected_index = max(0, min(self.selected_index, len(self.entries) - 1))
        else:
            self.selected_index = 0

    def _change_directory(self, target, select_name=None):
        # List first: on failure nothing below has been touched.
        try:
            entries = self._lister(target)
        except ListError as exc:
            return self._fail(str(exc))
        self.current = target
        self.entries = entries
        self.selected_index = 0
        self.scroll_offset = 0
        self.error_message = None
        if select_name is not None:
            self._select_name(select_name)
        return ActionResult(ActionType.REFRESH)

    # --- Transitions ---

    def move_selection(self, delta):
        if not self.entries:
            self.selected_index = 0
            return None
        self.selected_index += delta
        self._clamp_selection()
        return ActionResult(ActionType.REFRESH)

    def move_to_first(self):
        return self.move_selection(-len(self.entries))

    def move_to_last(self):
        return self.move_selection(len(self.entries))

    def page(self, direction):
        return self.move_selection(direction * self.PAGE_SIZE)

    def descend(self):
        """Enter the highlighted directory; highlighted files are ignored."""
        entry = self.selected_entry()
        if entry is None or not entry.is_dir:
            return None
        try:
            target = self.current.child(entry.name)
        except PathError as exc:
            return self._fail(str(exc))
        return self._change_directory(target)

    def ascend(self):
        """Go to the parent directory, never above the root."""
        if self.current.is_root:
            return None
        return self._change_directory(self.current.parent, select_name=self.current.name)

    def refresh(self):
        """Re-list the current directory, keeping the highlighted name when possible."""
        entry = self.selected_entry()
        old_name = entry.name if entry else None
        try:
            entries = self._lister(self.current)
        except ListError as exc:
            return self._fail(str(exc))
        self.entries = entries
        if old_name is None or not self._select_name(old_name):
            self._clamp_selection()
        return ActionResult(ActionType.REFRESH)

    def ensure_visible(self, view_height):
        """Keep the highlighted row inside a viewport of ``view_height`` rows."""
        if view_height <= 0:
            return
        if self.selected_index < self.scroll_offset:
            self.scroll_offset = self.selected_index
        elif self.selected_index >= self.scroll_offset + view_height:
            self.scroll_offset = self.selected_index - view_height + 1
        max_offset = max(0, len(self.entries) - view_height)
        self.scroll_offset = max(0, min(self.scroll_offset, max_offset))
