# main.py

"""Streamlit web UI for the Silly Word Story Game.

Players paste a story, the app picks words to replace, and the finished
silly story (or a printable fill-in-the-blank template) is shown and can be
downloaded.
"""

import streamlit as st
import logging

from storygame.core.definitions import GameMode, GamePhase
from storygame.core.exceptions import StorySourceError
from storygame.logging_config import configure_logging
from storygame.logic.worksheet import (
    export_filename,
    render_story_document,
    render_worksheet,
)
from storygame.service.config import settings
from storygame.service.session import GameSession
from storygame.service.stories import StoryRepository

configure_logging(settings.log_level)

logger = logging.getLogger(__name__)

MODE_LABELS = {
    GameMode.DIRECT_FILL: "Interactive: fill in the words here",
    GameMode.TEMPLATE: "Static: printable template with numbered blanks",
    GameMode.CONVERSATION: "Chatbot: the story bot asks for each word",
}

SAMPLE_STORY = (
    "The quick brown fox jumps over the lazy dog. The beautiful princess danced "
    "gracefully in the moonlight while the brave knight fought the terrible dragon."
)


def get_session() -> GameSession:
    """Returns the game session stored for this browser tab."""
    if "game" not in st.session_state:
        st.session_state.game = GameSession()
        st.session_state.story_input = SAMPLE_STORY
    return st.session_state.game


def show_outcome(outcome) -> None:
    if not outcome.message:
        return
    if outcome.success:
        st.info(outcome.message)
    else:
        st.warning(outcome.message)


def render_setup(game: GameSession) -> None:
    mode = st.radio(
        "Choose your mode",
        options=list(MODE_LABELS),
        format_func=MODE_LABELS.get,
        index=list(MODE_LABELS).index(game.mode),
    )
    if mode != game.mode:
        game.set_mode(mode)

    if settings.stories_db_path and st.button("Random story"):
        try:
            st.session_state.story_input = StoryRepository(
                settings.stories_db_path
            ).random_story()
        except StorySourceError as e:
            logger.error("Random story unavailable", extra={"reason": str(e)})
            st.error("Could not load a random story. Please write your own!")

    text = st.text_area(
        "Enter your complete story",
        key="story_input",
        height=250,
        max_chars=settings.max_input_chars,
        placeholder="Write a complete story here. I'll find words to make it silly!",
    )

    actions = {
        GameMode.DIRECT_FILL: ("Analyze Story", game.analyze),
        GameMode.TEMPLATE: ("Generate Template", game.build_template),
        GameMode.CONVERSATION: ("Start Chatbot Game", game.start_conversation),
    }
    label, action = actions[game.mode]

    if st.button(label, type="primary", disabled=not text.strip()):
        with st.spinner("Analyzing story..."):
            logger.info(f"Processing story of length: {len(text)}")
            outcome = action(text)
        st.session_state.last_outcome = outcome
        st.rerun()


def render_playing(game: GameSession) -> None:
    st.subheader(game.title)
    st.markdown("Replace these words with something silly!")

    if not game.blanks:
        st.info("There are no words to replace, so your story stays as it is.")

    columns = st.columns(2)
    for i, blank in enumerate(game.blanks):
        with columns[i % 2]:
            value = st.text_input(
                blank.label.upper(),
                value=game.replacements.get(blank.id, ""),
                key=f"blank-{blank.id}",
                placeholder=f"Silly {blank.label}!",
                help=game.hint_for(blank),
            )
            game.set_replacement(blank.id, value)

    ready = settings.allow_partial_fill or not game.missing_ids
    if st.button("Generate My Story!", type="primary", disabled=not ready):
        st.session_state.last_outcome = game.generate()
        st.rerun()


def render_chat(game: GameSession) -> None:
    st.subheader("Story Bot")
    for message in game.messages:
        with st.chat_message("assistant" if message.sender == "bot" else "user"):
            st.write(message.text)

    answer = st.chat_input("Type your silly word!")
    if answer:
        st.session_state.last_outcome = game.submit_answer(answer)
        st.rerun()


def render_completed(game: GameSession) -> None:
    st.subheader(game.title)

    if game.mode == GameMode.TEMPLATE:
        words, story = st.columns([1, 2])
        with words:
            st.markdown("**Words Needed**")
            for blank in game.blanks:
                st.markdown(f"{blank.display_index}. {blank.label.upper()}")
        with story:
            st.text(game.template_text)
        document = render_worksheet(game.title, list(game.blanks), game.template_text)
    else:
        if game.mode == GameMode.CONVERSATION:
            with st.expander("Conversation"):
                for message in game.messages:
                    st.markdown(f"**{message.sender}**: {message.text}")
        st.markdown(game.highlighted_text)
        document = render_story_document(game.title, game.story_text)

    st.download_button(
        "Download",
        data=document,
        file_name=export_filename(game.title),
        mime="text/plain",
    )

    if st.button("New Game"):
        game.reset()
        st.rerun()


def main():
    """Run the Streamlit application UI.

    Configures the page, shows the view for the current game phase, and
    reports the outcome of the last action.
    """
    st.set_page_config(page_title="Silly Word Story Game", page_icon="📝")

    st.title("Silly Word Story Game")
    st.markdown("Turn any story into a silly fill-in-the-blanks game.")
    st.markdown("---")

    game = get_session()

    outcome = st.session_state.pop("last_outcome", None)
    if outcome is not None:
        show_outcome(outcome)

    try:
        if game.phase == GamePhase.SETUP:
            render_setup(game)
        elif game.phase == GamePhase.PLAYING:
            render_playing(game)
        elif game.phase == GamePhase.CHATTING:
            render_chat(game)
        else:
            render_completed(game)

    except Exception:
        st.error("An unexpected error occurred. Please start a new game.")
        logger.error(
            "Unexpected error in main application loop",
            exc_info=True,
            extra={"phase": game.phase, "mode": game.mode},
        )
        if st.button("Start over"):
            game.reset()
            st.rerun()

    with st.sidebar:
        st.header("How to play")
        st.markdown("""
        1. Write or paste a complete story.
        2. Choose a mode: interactive, static template, or chatbot.
        3. Provide silly replacement words, or print the template.
        4. Download your creation and share it with friends.
        """)

        st.header("Status")
        st.success(f"Phase: {game.phase}")


if __name__ == "__main__":
    main()
