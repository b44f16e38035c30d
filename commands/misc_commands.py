import discord

import utility.helper_functions as helpers
from utility.logger import get_logger
log = get_logger()


def register_commands(bot, storage):

    @bot.tree.command(name="help", description="Show all available commands.")
    async def slash_help(interaction: discord.Interaction):
        """
        Show all available commands.
        """
        await helpers.log_interaction(interaction)
        response = (
            "## **Million Dollars, But... Bot Commands**\n"
            "Commands with a 🔒 can only be used by whitelisted admins\n"

            "### 💵 **The Game**\n"
            "- ❓  **/mdb question**: Get a new question nobody has been asked yet.\n"
            "- 🗳️  **/mdb answer**: Answer `yes`, `no`, or `maybe...` with a `counter_offer`. "
            "Answers the most recent question unless you pass an `id`.\n\n"

            "### 📊 **Stats**\n"
            "- 💰  **/mdb stats**: Show how much money you (or someone else) has.\n"
            "- 🏆  **/mdb leaderboard**: Show who has the most money.\n\n"

            "### 🛠️ **Admin**\n"
            "- 💾  **/mdb save** 🔒: Save everyone's stats to disk right now.\n\n"

            f"*{storage.remaining_question_count()} of {len(storage.questions)} questions are still unasked.*"
        )
        await interaction.response.send_message(response)
