# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

from typing import Protocol, runtime_checkable

from loguru import logger

from coreason_playground.exceptions import (
    DuplicateNameError,
    InvalidNameError,
    LastFileError,
    NotFoundError,
)
from coreason_playground.models import File


@runtime_checkable
class Confirmation(Protocol):
    """
    Asynchronous confirmation capability supplied by the UI.
    """

    async def confirm_close(self, file: File) -> bool:
        """
        Ask whether a file with unsaved changes may be closed.
        """
        ...

    async def confirm_overwrite(self, name: str) -> bool:
        """
        Ask whether an existing file may be overwritten by an import.
        """
        ...


class FileStore:
    """Owns the named text buffers and the active-file pointer.

    Files are kept in insertion order, which is also tab order. The store is
    never empty and the active name always refers to an existing file.
    """

    def __init__(
        self,
        initial_name: str = "main.py",
        default_extension: str = ".py",
        confirmation: Confirmation | None = None,
    ):
        """Initializes the FileStore with a single empty file.

        Args:
            initial_name: Name of the file the store starts with.
            default_extension: Suffix appended to new file names that lack it.
            confirmation: Optional capability consulted by the request_* operations.
        """
        self.default_extension = default_extension
        self.confirmation = confirmation
        self._files: dict[str, File] = {initial_name: File(name=initial_name)}
        self._active_name = initial_name

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, name: object) -> bool:
        return name in self._files

    @property
    def active_name(self) -> str:
        return self._active_name

    @property
    def active(self) -> File:
        return self._files[self._active_name]

    @property
    def names(self) -> list[str]:
        return list(self._files)

    def get(self, name: str) -> File:
        """Return a copy of the named file.

        Raises:
            NotFoundError: If no file has that name.
        """
        return self._require(name).model_copy()

    def normalize(self, name: str) -> str:
        """Strip a name and append the default extension when it is missing.

        Raises:
            InvalidNameError: If the name is blank.
        """
        clean = self._clean(name)
        if not clean.endswith(self.default_extension):
            clean = f"{clean}{self.default_extension}"
        return clean

    def create(self, name: str) -> str:
        """Create an empty file.

        Args:
            name: Requested name; normalized with the default extension.

        Returns:
            str: The normalized name of the new file.

        Raises:
            InvalidNameError: If the name is blank.
            DuplicateNameError: If the normalized name already exists.
        """
        normalized = self.normalize(name)
        if normalized in self._files:
            raise DuplicateNameError(f"File {normalized} already exists")

        self._files[normalized] = File(name=normalized)
        logger.info(f"Created file {normalized}")
        return normalized

    def save(self, buffer: str) -> None:
        """Flush the caller's edit buffer into the active file."""
        self._files[self._active_name].content = buffer

    def switch_to(self, name: str, buffer: str | None = None) -> str:
        """Make another file active.

        The caller's edit buffer is flushed into the currently active file
        before the pointer moves, so no edit is lost on switch.

        Args:
            name: The file to activate.
            buffer: Current content of the editor, if any.

        Returns:
            str: The content of the newly active file.

        Raises:
            NotFoundError: If no file has that name. Nothing is flushed.
        """
        target = self._require(name)
        if buffer is not None:
            self.save(buffer)
        self._active_name = name
        return target.content

    def close(self, name: str) -> str:
        """Close a file.

        Closing the active file activates the first remaining file.

        Returns:
            str: The active file name after the close.

        Raises:
            LastFileError: If this is the only remaining file.
            NotFoundError: If no file has that name.
        """
        if len(self._files) <= 1:
            raise LastFileError("Cannot close the last file")
        self._require(name)

        del self._files[name]
        if self._active_name == name:
            self._active_name = next(iter(self._files))
        logger.info(f"Closed file {name}, active file is {self._active_name}")
        return self._active_name

    def rename(self, old_name: str, new_name: str) -> None:
        """Rename a file, keeping its content and tab position.

        Raises:
            NotFoundError: If old_name does not exist.
            InvalidNameError: If new_name is blank.
            DuplicateNameError: If new_name already exists.
        """
        file = self._require(old_name)
        new_name = self._clean(new_name)
        if new_name == old_name:
            return
        if new_name in self._files:
            raise DuplicateNameError(f"File {new_name} already exists")

        file.name = new_name
        self._files = {(new_name if key == old_name else key): value for key, value in self._files.items()}
        if self._active_name == old_name:
            self._active_name = new_name

    def import_content(self, name: str, content: str) -> bool:
        """Insert or overwrite a file with imported content.

        Overwriting is silent: there is no merge or conflict detection.

        Returns:
            bool: True when an existing file was overwritten.

        Raises:
            InvalidNameError: If the name is blank.
        """
        name = self._clean(name)
        existing = self._files.get(name)
        if existing is not None:
            existing.content = content
            existing.saved_content = content
            logger.warning(f"Import overwrote existing file {name}")
            return True

        self._files[name] = File(name=name, content=content, saved_content=content)
        logger.info(f"Imported file {name} ({len(content)} chars)")
        return False

    def mark_saved(self, name: str) -> None:
        file = self._require(name)
        file.saved_content = file.content

    def snapshot_all(self) -> tuple[File, ...]:
        """Return copies of all files in stable order."""
        return tuple(file.model_copy() for file in self._files.values())

    async def request_close(self, name: str) -> bool:
        """Close a file after confirming, when it has unsaved changes.

        Returns:
            bool: False if the confirmation was declined and nothing changed.
        """
        file = self._require(name)
        if len(self._files) <= 1:
            raise LastFileError("Cannot close the last file")
        if file.is_modified and self.confirmation is not None:
            if not await self.confirmation.confirm_close(file.model_copy()):
                logger.info(f"Close of {name} declined")
                return False
        self.close(name)
        return True

    async def request_import(self, name: str, content: str) -> bool:
        """Import content after confirming, when it would overwrite a file.

        Returns:
            bool: False if the confirmation was declined and nothing changed.
        """
        name = self._clean(name)
        if name in self._files and self.confirmation is not None:
            if not await self.confirmation.confirm_overwrite(name):
                logger.info(f"Import over {name} declined")
                return False
        self.import_content(name, content)
        return True

    @staticmethod
    def _clean(name: str) -> str:
        clean = name.strip()
        if not clean:
            raise InvalidNameError("File name must not be blank")
        return clean

    def _require(self, name: str) -> File:
        file = self._files.get(name)
        if file is None:
            raise NotFoundError(f"File {name} not found")
        return file
