import logging
from typing import Callable, Optional

from .utils import MediaPath, list_sibling_videos


class SiblingNavigator:
    """Steps through the playable files that share a folder with the current one.

    The folder is listed again on every call, so the result always reflects the
    directory as it is right now.
    """

    def __init__(self, lister: Callable[[object], list[MediaPath]] = list_sibling_videos):
        self._lister = lister

    def get_adjacent(self, current, forward: bool) -> Optional[MediaPath]:
        current = MediaPath.from_path(current)
        siblings = self._lister(current)
        size = len(siblings)
        if size == 0:
            logging.debug("No siblings for %s", current)
            return None
        try:
            index = siblings.index(current)
        except ValueError:
            logging.debug("Current file missing from its folder listing: %s", current)
            return None

        next_index = index + (1 if forward else -1)
        if 0 <= next_index < size:
            return siblings[next_index]
        return siblings[0] if forward else siblings[-1]

    def next(self, current) -> Optional[MediaPath]:
        return self.get_adjacent(current, forward=True)

    def previous(self, current) -> Optional[MediaPath]:
        return self.get_adjacent(current, forward=False)
