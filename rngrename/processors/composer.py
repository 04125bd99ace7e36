"""Compose final filenames from generated names."""

from rngrename.models.rename import ExtensionMode


def split_extension(filename: str) -> tuple[str, str]:
    """Split a filename on its last dot that is not the first character.

    Compound suffixes are not recognised: ``archive.tar.gz`` gives
    ``("archive.tar", ".gz")``. A leading dot marks a hidden file, not an
    extension, so ``.bashrc`` has no extension.

    Returns:
        The stem and the extension including its dot (empty if there is none).
    """
    index = filename.rfind(".")
    if index <= 0:
        return filename, ""
    return filename[:index], filename[index:]


def split_all_extensions(filename: str) -> tuple[str, str]:
    """Split a filename on its first dot that is not the first character.

    ``archive.tar.gz`` gives ``("archive", ".tar.gz")``.
    """
    index = filename.find(".", 1)
    if index == -1:
        return filename, ""
    return filename[:index], filename[index:]


def normalize_extension(extension: str) -> str:
    """Make a configured extension start with a dot; empty stays empty."""
    if not extension or extension.startswith("."):
        return extension
    return f".{extension}"


class NameComposer:
    """Applies prefix, suffix and extension policy to generated names."""

    def __init__(
        self,
        prefix: str = "",
        suffix: str = "",
        ext_mode: ExtensionMode = ExtensionMode.KEEP,
        forced_extension: str | None = None,
    ) -> None:
        """Initialize the composer.

        Args:
            prefix: Static text placed before the generated name.
            suffix: Static text placed after the generated name, before the extension.
            ext_mode: How to derive the extension from the original filename.
            forced_extension: Extension used for ``ExtensionMode.FORCE``, with or without a leading dot.
        """
        if ext_mode is ExtensionMode.FORCE and forced_extension is None:
            raise ValueError("A forced extension is required for ExtensionMode.FORCE")
        self.prefix = prefix
        self.suffix = suffix
        self.ext_mode = ext_mode
        self.forced_extension = normalize_extension(forced_extension or "")

    def extension_for(self, source_name: str) -> str:
        """The extension (with its dot) the new name of ``source_name`` ends with."""
        if self.ext_mode is ExtensionMode.KEEP:
            return split_extension(source_name)[1]
        if self.ext_mode is ExtensionMode.KEEP_ALL:
            return split_all_extensions(source_name)[1]
        if self.ext_mode is ExtensionMode.FORCE:
            return self.forced_extension
        return ""

    def compose(self, raw_name: str, source_name: str) -> str:
        return f"{self.prefix}{raw_name}{self.suffix}{self.extension_for(source_name)}"
