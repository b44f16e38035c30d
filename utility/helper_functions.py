import discord

import config.config as cfg
from utility.logger import get_logger
log = get_logger()


async def log_interaction(interaction: discord.Interaction):
    """Writes who ran which command, and where, to the log."""
    command_name = interaction.command.qualified_name if interaction.command else "unknown"
    where = f"guild {interaction.guild.name}" if interaction.guild else "DMs"
    options = {
        option["name"]: option.get("value")
        for option in (interaction.data or {}).get("options", [])
        if "value" in option
    }
    # Subcommands nest their options one level down
    for sub in (interaction.data or {}).get("options", []):
        for option in sub.get("options", []):
            options[option["name"]] = option.get("value")
    log.info(f"[Interaction] {interaction.user} ({interaction.user.id}) used /{command_name} in {where} {options}")


async def authorize_interaction(interaction: discord.Interaction) -> bool:
    """
    Checks the user against the admin list in the config and tells them off if they're not on it.
    Returns:
        bool: True if the user may run the command.
    """
    command_name = interaction.command.qualified_name if interaction.command else "unknown"
    if interaction.user.id in cfg.config.bot.admin_users:
        log.info(f"[Auth] Allowed: {interaction.user} ({interaction.user.id}) /{command_name}")
        return True
    log.info(f"[Auth] DENIED: {interaction.user} ({interaction.user.id}) /{command_name}")
    await interaction.response.send_message("⛔ You are not allowed to use this command.", ephemeral=True)
    return False


def format_money(amount: int) -> str:
    return f"${amount:,}"


def trim_to_char_limit(lines, char_limit: int, header: str = "") -> str:
    """
    Joins lines under a header, dropping lines from the end until it fits in char_limit.
    Args:
        lines (list[str]): The lines to join.
        char_limit (int): Max length of the message, usually the Discord limit.
        header (str): Text placed above the lines, never trimmed.
    Returns:
        str: The message.
    """
    message = header + "\n".join(lines)
    kept = len(lines)
    while len(message) > char_limit and kept > 0:
        kept -= 1
        message = header + "\n".join(lines[:kept]) + "\n..."
    if kept < len(lines):
        log.debug(f"Trimmed message to fit within Discord's character limit. {len(lines) - kept} lines removed.")
    return message
