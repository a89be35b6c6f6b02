# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_playground

from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger
from pydantic import ValidationError

from coreason_playground import commands as cmd
from coreason_playground.config import PlaygroundConfig
from coreason_playground.editing import find_next, format_code, replace_all
from coreason_playground.exceptions import PlaygroundError
from coreason_playground.export import export_console, export_html, export_raw
from coreason_playground.factory import GatewayFactory
from coreason_playground.files import Confirmation, FileStore
from coreason_playground.gateway import RuntimeGateway
from coreason_playground.models import Channel, EditorSettings, Severity
from coreason_playground.output import OutputSink
from coreason_playground.session import ExecutionSession
from coreason_playground.settings import SettingsStore, next_theme

Handler = Callable[[Any], Awaitable[cmd.Reply]]


class EditorState:
    """The editor core, constructed and owned by the host process.

    Holds the file store, output sink, execution session and settings. UIs
    drive it exclusively through `dispatch`; it never reaches back into
    rendering.
    """

    def __init__(
        self,
        config: PlaygroundConfig | None = None,
        gateway: RuntimeGateway | None = None,
        confirmation: Confirmation | None = None,
        settings_store: SettingsStore | None = None,
        sink: OutputSink | None = None,
    ):
        """Initializes the EditorState.

        Args:
            config: Configuration; defaults are read from the environment.
            gateway: Optional gateway; built by GatewayFactory when omitted.
            confirmation: Optional UI confirmation capability for close/overwrite.
            settings_store: Optional settings persistence.
            sink: Optional output sink.
        """
        self.config = config or PlaygroundConfig()
        self.gateway = gateway or GatewayFactory.get_gateway(self.config)
        self.output = sink or OutputSink()
        self.files = FileStore(
            initial_name=self.config.initial_file,
            default_extension=self.config.default_extension,
            confirmation=confirmation,
        )
        self.session = ExecutionSession(self.gateway, self.output)
        self.settings_store = settings_store or SettingsStore(self.config.settings_path, self.config.settings_key)
        self.settings = self.settings_store.load()

        self._handlers: dict[type[cmd.Command], Handler] = {
            cmd.Submit: self._submit,
            cmd.Cancel: self._cancel,
            cmd.NewFile: self._new_file,
            cmd.SwitchFile: self._switch_file,
            cmd.SaveBuffer: self._save_buffer,
            cmd.CloseFile: self._close_file,
            cmd.RenameFile: self._rename_file,
            cmd.ImportFile: self._import_file,
            cmd.LoadPackage: self._load_package,
            cmd.TerminalCommand: self._terminal,
            cmd.ClearOutput: self._clear_output,
            cmd.Debug: self._debug,
            cmd.ExportFile: self._export_file,
            cmd.ExportConsole: self._export_console,
            cmd.FormatBuffer: self._format_buffer,
            cmd.FindNext: self._find_next,
            cmd.ReplaceAll: self._replace_all,
            cmd.UpdateSettings: self._update_settings,
            cmd.ToggleTheme: self._toggle_theme,
        }

    async def __aenter__(self) -> "EditorState":
        """Initializes the runtime gateway."""
        await self.start()
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Shuts the runtime gateway down."""
        await self.close()

    async def start(self) -> None:
        """Initialize the runtime gateway.

        Raises:
            InitError: If the gateway fails to come up.
        """
        await self.session.initialize(self.config.gateway_config())

    async def close(self) -> None:
        await self.gateway.shutdown()

    async def dispatch(self, command: cmd.Command) -> cmd.Reply:
        """Apply a UI intent to the core.

        Every PlaygroundError raised while handling the command is converted
        into a rejected Reply.

        Raises:
            TypeError: If the command type is unknown.
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported command: {type(command).__name__}")

        try:
            return await handler(command)
        except PlaygroundError as e:
            logger.warning(f"{type(command).__name__} rejected: {e}")
            return cmd.Reply(ok=False, error=type(e).__name__, message=str(e))

    async def _submit(self, command: cmd.Submit) -> cmd.Reply:
        outcome = await self.session.submit(command.code, command.file_name)
        return cmd.Reply(message=self.session.status_message, payload=outcome)

    async def _cancel(self, command: cmd.Cancel) -> cmd.Reply:
        stopped = self.session.cancel()
        return cmd.Reply(ok=stopped, message=self.session.status_message)

    async def _new_file(self, command: cmd.NewFile) -> cmd.Reply:
        name = self.files.create(command.name)
        content = self.files.switch_to(name, command.buffer)
        return cmd.Reply(message=f"Created {name}", payload={"name": name, "content": content})

    async def _switch_file(self, command: cmd.SwitchFile) -> cmd.Reply:
        content = self.files.switch_to(command.name, command.buffer)
        return cmd.Reply(payload={"name": command.name, "content": content})

    async def _save_buffer(self, command: cmd.SaveBuffer) -> cmd.Reply:
        self.files.save(command.content)
        return cmd.Reply()

    async def _close_file(self, command: cmd.CloseFile) -> cmd.Reply:
        if not await self.files.request_close(command.name):
            return cmd.Reply(ok=False, message=f"Close of {command.name} cancelled")
        active = self.files.active
        return cmd.Reply(
            message=f"Closed {command.name}",
            payload={"name": active.name, "content": active.content},
        )

    async def _rename_file(self, command: cmd.RenameFile) -> cmd.Reply:
        self.files.rename(command.old_name, command.new_name)
        return cmd.Reply(message=f"Renamed {command.old_name} to {command.new_name.strip()}")

    async def _import_file(self, command: cmd.ImportFile) -> cmd.Reply:
        # Flush first: the import may target the active file
        if command.buffer is not None:
            self.files.save(command.buffer)
        name = command.name.strip()
        if not await self.files.request_import(name, command.content):
            return cmd.Reply(ok=False, message=f"Import of {name} cancelled")
        content = self.files.switch_to(name)
        return cmd.Reply(message=f"Loaded {name}", payload={"name": name, "content": content})

    async def _load_package(self, command: cmd.LoadPackage) -> cmd.Reply:
        loaded = await self.session.load_package(command.name)
        message = f"{command.name} installed successfully" if loaded else f"Failed to install {command.name}"
        return cmd.Reply(ok=loaded, message=message)

    async def _terminal(self, command: cmd.TerminalCommand) -> cmd.Reply:
        return cmd.Reply(ok=await self.session.run_terminal(command.command))

    async def _clear_output(self, command: cmd.ClearOutput) -> cmd.Reply:
        self.output.clear(command.channel)
        return cmd.Reply(message=f"{command.channel.value.capitalize()} cleared")

    async def _debug(self, command: cmd.Debug) -> cmd.Reply:
        self.output.append(
            Channel.DEBUG,
            Severity.INFO,
            "Debug mode activated\nSet breakpoints by clicking line numbers",
        )
        return cmd.Reply()

    async def _export_file(self, command: cmd.ExportFile) -> cmd.Reply:
        # Flush first: a raw export marks the exported content as saved
        if command.buffer is not None:
            self.files.save(command.buffer)
        if command.format == "html":
            document = export_html(self.files, command.name)
        else:
            document = export_raw(self.files, command.name)
            self.files.mark_saved(command.name or self.files.active_name)
        return cmd.Reply(message=f"Exported {document.filename}", payload=document)

    async def _export_console(self, command: cmd.ExportConsole) -> cmd.Reply:
        document = export_console(self.output)
        return cmd.Reply(message="Output downloaded", payload=document)

    async def _format_buffer(self, command: cmd.FormatBuffer) -> cmd.Reply:
        formatted = format_code(command.content)
        self._auto_save(formatted)
        return cmd.Reply(message="Code formatted", payload=formatted)

    async def _find_next(self, command: cmd.FindNext) -> cmd.Reply:
        span = find_next(command.content, command.term, command.position)
        if span is None:
            return cmd.Reply(ok=False, message=f'"{command.term}" not found')
        return cmd.Reply(payload=span)

    async def _replace_all(self, command: cmd.ReplaceAll) -> cmd.Reply:
        text, count = replace_all(command.content, command.term, command.replacement)
        self._auto_save(text)
        return cmd.Reply(message=f'Replaced {count} occurrences of "{command.term}"', payload=text)

    async def _update_settings(self, command: cmd.UpdateSettings) -> cmd.Reply:
        # Accept both the persisted camelCase keys and field names
        aliases = {field.alias: name for name, field in EditorSettings.model_fields.items() if field.alias}
        changes = {aliases.get(key, key): value for key, value in command.changes.items()}
        merged = {**self.settings.model_dump(), **changes}
        try:
            settings = EditorSettings.model_validate(merged)
        except ValidationError as e:
            logger.warning(f"Rejected settings update: {e}")
            return cmd.Reply(ok=False, error="ValidationError", message=str(e))
        return self._apply_settings(settings, "Settings saved")

    async def _toggle_theme(self, command: cmd.ToggleTheme) -> cmd.Reply:
        theme = next_theme(self.settings.theme)
        return self._apply_settings(self.settings.model_copy(update={"theme": theme}), f"Switched to {theme} theme")

    def _auto_save(self, buffer: str) -> None:
        """Flush a buffer rewritten by the core into the active file when auto-save is on."""
        if self.settings.auto_save:
            self.files.save(buffer)

    def _apply_settings(self, settings: EditorSettings, message: str) -> cmd.Reply:
        self.settings = settings
        self.settings_store.save(settings)
        return cmd.Reply(message=message, payload=settings)
