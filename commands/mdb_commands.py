from typing import Optional
import discord
from discord import app_commands

import config.config as cfg
import tasks.autosave_tasks as autosave_tasks
import utility.helper_functions as helpers
from commands.requests import AnswerRequest, AnswerValidationError, CHOICE_YES, CHOICE_NO, CHOICE_MAYBE
from storage.errors import (
    StorageError,
    NoQuestionsAskedError,
    NoMoreRemainingQuestionsError,
)
from storage.storage import Storage
from utility.logger import get_logger
log = get_logger()

QUESTION_FORMAT = "You get a million dollars, but... {text} (ID: `{id}`)"
ANSWER_RECORDED_FORMAT = "Cool, answer recorded. <@{player_id}>, you've currently got {total}! To see your full stats, try `/mdb stats`"
GENERIC_ERROR = "Something went wrong on my end, sorry! Please tell an admin."

# ──────────────────────────
# Handlers, no Discord types past this point
# ──────────────────────────
def handle_question(storage: Storage) -> str:
    try:
        question = storage.get_unasked_question()
    except NoMoreRemainingQuestionsError:
        return "Whoops, all the prewritten questions have been asked! Ask an admin to add more!"
    except StorageError as e:
        log.error(f"Unexpected storage error getting a question: {e}")
        return GENERIC_ERROR
    return QUESTION_FORMAT.format(text=question.text, id=question.id)


def handle_answer(storage: Storage, player_id: str, request: AnswerRequest) -> str:
    """Records the answer and replies with the player's new total."""
    question_id = request.question_id
    if question_id is None:
        try:
            question_id = storage.get_most_recent_question_id()
        except NoQuestionsAskedError:
            return "No one has asked for any questions yet (or my memory has been reset)! Try `/mdb question`"
    elif not storage.has_question_been_asked(question_id):
        return f"No question with ID `{question_id}` has been asked! Try `/mdb question` for a new question."

    try:
        stats = storage.update_stats(question_id, player_id, request.offer)
    except (StorageError, ValueError) as e:
        log.error(f"Failed to record answer to {question_id} for {player_id}: {e}")
        return GENERIC_ERROR
    log.debug(f"Player {player_id} answered {question_id} with {request.offer}, total {stats.total_money}")
    return ANSWER_RECORDED_FORMAT.format(player_id=player_id, total=helpers.format_money(stats.total_money))


def handle_stats(storage: Storage, player_id: str) -> str:
    stats = storage.get_stats(player_id)
    if not stats.answered:
        return f"<@{player_id}> hasn't answered any questions yet. Try `/mdb question`!"

    accepted = sum(1 for offer in stats.answered.values() if offer > 0)
    return (
        f"## Stats for <@{player_id}>\n"
        f"- 💰 Total: **{helpers.format_money(stats.total_money)}**\n"
        f"- ❓ Questions answered: {len(stats.answered)}\n"
        f"- ✅ Took the money (or countered): {accepted}\n"
        f"- ❌ Turned it down: {len(stats.answered) - accepted}"
    )


def handle_leaderboard(storage: Storage, limit: int, char_limit: int) -> str:
    ranked = storage.leaderboard(limit)
    if not ranked:
        return "Nobody has answered anything yet. Try `/mdb question`!"

    lines = [
        f"{place}. <@{player_id}> - {helpers.format_money(stats.total_money)} ({len(stats.answered)} answered)"
        for place, (player_id, stats) in enumerate(ranked, start=1)
    ]
    return helpers.trim_to_char_limit(lines, char_limit, header="## 🏆 Million Dollar Leaderboard\n")


async def handle_save(storage: Storage) -> str:
    """Saves stats on the autosave executor so the event loop never waits on file I/O or the stats lock."""
    try:
        await autosave_tasks.async_save_stats(storage)
    except StorageError as e:
        log.error(f"Manual stats save failed: {e}")
        return f"❌ Failed to save stats: {e}"
    return f"💾 Saved stats to `{storage.stats.save_path}`."


# ──────────────────────────
# Discord glue
# ──────────────────────────
async def reject_dms(interaction: discord.Interaction) -> bool:
    if interaction.guild is None:
        await interaction.response.send_message("Sorry, you can't use this bot in DMs.", ephemeral=True)
        return True
    return False


class MdbCommands(app_commands.Group):
    def __init__(self, storage: Storage):
        super().__init__(name="mdb", description="You get a million dollars, but...")
        self.storage = storage

    @app_commands.command(name="question", description="You get a million dollars, but...")
    async def mdb_question(self, interaction: discord.Interaction):
        await helpers.log_interaction(interaction)
        if await reject_dms(interaction):
            return
        await interaction.response.send_message(handle_question(self.storage))

    @app_commands.command(name="answer", description="Would you take the million dollars? Answer here!")
    @app_commands.describe(
        choice="Would you take the million dollars? Answer `yes`, `no`, or `maybe...` along with your `counter_offer`.",
        counter_offer="If you answered `maybe...`, your counter-offer in whole dollars. Ignored for `yes` or `no`.",
        question_id="Optional question ID to answer a previously asked question. Defaults to the most recent one.",
    )
    @app_commands.rename(question_id="id")
    @app_commands.choices(choice=[
        app_commands.Choice(name="Yes, I would take the million dollars.", value=CHOICE_YES),
        app_commands.Choice(name="No, I would not take the million dollars.", value=CHOICE_NO),
        app_commands.Choice(name="Maybe... I'd do it for this much:", value=CHOICE_MAYBE),
    ])
    async def mdb_answer(
        self,
        interaction: discord.Interaction,
        choice: app_commands.Choice[str],
        counter_offer: Optional[int] = None,
        question_id: Optional[str] = None,
    ):
        await helpers.log_interaction(interaction)
        if await reject_dms(interaction):
            return
        try:
            request = AnswerRequest.from_options(
                choice.value,
                counter_offer=counter_offer,
                question_id=question_id,
                min_counter_offer=cfg.config.game.min_counter_offer,
                max_counter_offer=cfg.config.game.max_counter_offer,
            )
        except AnswerValidationError as e:
            await interaction.response.send_message(str(e), ephemeral=True)
            return
        await interaction.response.send_message(
            handle_answer(self.storage, str(interaction.user.id), request),
            allowed_mentions=discord.AllowedMentions.none(),
        )

    @app_commands.command(name="stats", description="Show how much money you (or someone else) has racked up.")
    @app_commands.describe(user="Optional: whose stats to show. Defaults to you.")
    async def mdb_stats(self, interaction: discord.Interaction, user: Optional[discord.Member] = None):
        await helpers.log_interaction(interaction)
        if await reject_dms(interaction):
            return
        target = user or interaction.user
        await interaction.response.send_message(
            handle_stats(self.storage, str(target.id)),
            allowed_mentions=discord.AllowedMentions.none(),
        )

    @app_commands.command(name="leaderboard", description="Show who has the most money.")
    async def mdb_leaderboard(self, interaction: discord.Interaction):
        await helpers.log_interaction(interaction)
        if await reject_dms(interaction):
            return
        await interaction.response.send_message(
            handle_leaderboard(self.storage, cfg.config.game.leaderboard_size, cfg.config.bot.discord_char_limit),
            allowed_mentions=discord.AllowedMentions.none(),
        )

    @app_commands.command(name="save", description="🔒 Save everyone's stats to disk right now.")
    async def mdb_save(self, interaction: discord.Interaction):
        await helpers.log_interaction(interaction)
        if not await helpers.authorize_interaction(interaction):
            return  # Stop execution if the user is not authorized
        # Saving can wait on the autosave thread, so defer before answering
        await interaction.response.defer(ephemeral=True, thinking=True)
        await interaction.followup.send(await handle_save(self.storage), ephemeral=True)


def register_commands(bot, storage: Storage):
    bot.tree.add_command(MdbCommands(storage))
