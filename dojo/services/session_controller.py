"""
Session controller: the training game state machine.

Owns the single Session of this process and mediates every transition:
menu navigation, graded training exchanges, hints, exams, the life/score
economy and the one-shot game-over leaderboard commit. The teacher oracle
and the leaderboard store are injected, so the controller runs without any
network, storage or rendering.
"""

from typing import Callable, List, Optional, Sequence, Tuple

import structlog

from dojo.core.config import GameConfig, game_config, settings
from dojo.core.exceptions import (
    AlreadyLoggedInError,
    InvalidIdentifierError,
    NotLoggedInError,
    OracleFailure,
    PersistenceError,
    SessionBusyError,
)
from dojo.domain.models.leaderboard import LeaderboardEntry, merge_entry, rank_entries
from dojo.domain.models.message import Message
from dojo.domain.models.session import Cue, EpisodeState, Session, SessionMode
from dojo.llm.prompts.teacher import (
    get_exam_prompt,
    get_hint_prompt,
    get_training_start_prompt,
)
from dojo.services import transcript
from dojo.services.classification import classify
from dojo.services.protocols import ILeaderboardStore, ITeacherOracle

log = structlog.get_logger(__name__)

MENU_TOKEN = "menu"
HINT_TOKENS = frozenset({"help", "hint"})
START_TRAINING_TOKEN = "1"
LEADERBOARD_TOKEN = "2"
STATUS_TOKEN = "3"

CueListener = Callable[[Cue], None]


class SessionController:
    """Drives one trainee's session.

    Inbound surface: login(), handle_command(), request_exam(), restart()
    and logout(). Everything else is read-only state for rendering.

    Only one oracle request may be outstanding; commands that arrive while
    busy raise SessionBusyError. Replies that resolve after a restart or
    logout are dropped.
    """

    def __init__(
        self,
        oracle: ITeacherOracle,
        leaderboard_store: ILeaderboardStore,
        leaderboard: Optional[Sequence[LeaderboardEntry]] = None,
        config: Optional[GameConfig] = None,
        topic: Optional[str] = None,
        cue_listener: Optional[CueListener] = None,
    ):
        self.oracle = oracle
        self.leaderboard_store = leaderboard_store
        self.config = config or game_config
        self.topic = topic or settings.training_topic
        self.cue_listener = cue_listener
        self.last_cue: Optional[Cue] = None

        self._leaderboard: List[LeaderboardEntry] = rank_entries(
            leaderboard or [], self.config.leaderboard.size
        )
        self.session = Session(lives=self.config.economy.max_lives)

    @classmethod
    async def create(
        cls,
        oracle: ITeacherOracle,
        leaderboard_store: ILeaderboardStore,
        **kwargs,
    ) -> "SessionController":
        """Build a controller with the leaderboard loaded from the store."""
        leaderboard = await leaderboard_store.load_leaderboard()
        log.info("session_controller_created", leaderboard_entries=len(leaderboard))
        return cls(oracle, leaderboard_store, leaderboard=leaderboard, **kwargs)

    # ==========================================================================
    # Read-only state
    # ==========================================================================

    @property
    def mode(self) -> SessionMode:
        return self.session.mode

    @property
    def lives(self) -> float:
        return self.session.lives

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def busy(self) -> bool:
        return self.session.busy

    @property
    def identifier(self) -> Optional[str]:
        return self.session.identifier

    @property
    def is_game_over(self) -> bool:
        return self.session.is_game_over

    @property
    def history(self) -> Tuple[Message, ...]:
        return tuple(self.session.history)

    @property
    def leaderboard(self) -> Tuple[LeaderboardEntry, ...]:
        return tuple(self._leaderboard)

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    def login(self, identifier: str) -> None:
        """
        Bind the trainee's name and show the welcome menu.

        Raises:
            InvalidIdentifierError: If the identifier is blank
            AlreadyLoggedInError: If a trainee is already logged in
        """
        name = (identifier or "").strip()
        if not name:
            raise InvalidIdentifierError("Identifier must not be empty")
        if self.session.logged_in:
            raise AlreadyLoggedInError(
                f"Already logged in as {self.session.identifier}"
            )

        self._reset(identifier=name)
        log.info("trainee_logged_in", identifier=name)

    def restart(self) -> None:
        """
        Start a fresh episode: full lives, zero score, welcome menu.

        Not gated on game over and safe to call repeatedly.

        Raises:
            NotLoggedInError: If nobody is logged in
        """
        self._require_login()
        self._reset(identifier=self.session.identifier)
        log.info("session_restarted", identifier=self.session.identifier)

    def logout(self) -> None:
        """Return to the pre-login state. The leaderboard is kept."""
        identifier = self.session.identifier
        self.session = Session(
            lives=self.config.economy.max_lives,
            generation=self.session.generation + 1,
        )
        self.oracle.reset()
        log.info("trainee_logged_out", identifier=identifier)

    def _reset(self, identifier: str) -> None:
        self.session = Session(
            identifier=identifier,
            mode=SessionMode.MENU,
            lives=self.config.economy.max_lives,
            score=0,
            busy=False,
            episode=EpisodeState.ACTIVE,
            generation=self.session.generation + 1,
            history=[transcript.welcome_message(identifier)],
        )
        self.oracle.reset()

    # ==========================================================================
    # Command dispatch
    # ==========================================================================

    async def handle_command(self, raw_input: str) -> None:
        """
        Dispatch free text or a reserved token against the current mode.

        Ignored entirely while the game is over.

        Raises:
            NotLoggedInError: If nobody is logged in
            SessionBusyError: If an oracle request is outstanding
        """
        self._require_login()
        if self.session.is_game_over:
            log.info("command_ignored_game_over", identifier=self.session.identifier)
            return
        self._require_idle()

        token = raw_input.strip().lower()
        if not token:
            log.debug("blank_command_ignored")
            return

        log.info(
            "command_dispatched",
            mode=self.session.mode.value,
            input_length=len(raw_input),
        )

        if token == MENU_TOKEN:
            self.session.mode = SessionMode.MENU
            self._append(transcript.menu_message())
            return

        if self.session.mode is SessionMode.TRAINING:
            if token in HINT_TOKENS:
                await self._hint(raw_input)
            else:
                await self._training_exchange(raw_input)
            return

        if token == START_TRAINING_TOKEN:
            await self._start_training()
        elif token == LEADERBOARD_TOKEN:
            self._append(transcript.user_message(raw_input))
            self._append(transcript.leaderboard_message(self._leaderboard))
        elif token == STATUS_TOKEN:
            self._append(transcript.user_message(raw_input))
            self._append(transcript.status_message(self.session))
        else:
            self._append(transcript.user_message(raw_input))
            self._append(transcript.rejection_message(raw_input.strip()))
            self._emit(Cue.NEGATIVE)
            log.info("menu_input_rejected", input_length=len(raw_input))

    async def request_exam(self) -> None:
        """
        Ask the teacher for a graded exam question.

        Inert outside TRAINING and while the game is over. Costs nothing up
        front; the reply is graded like any training answer.

        Raises:
            NotLoggedInError: If nobody is logged in
            SessionBusyError: If an oracle request is outstanding
        """
        self._require_login()
        if self.session.is_game_over:
            log.info("exam_ignored_game_over", identifier=self.session.identifier)
            return
        if self.session.mode is not SessionMode.TRAINING:
            log.info("exam_ignored_outside_training", mode=self.session.mode.value)
            return
        self._require_idle()

        self._append(transcript.exam_start_message())
        reply, current = await self._consult(get_exam_prompt(self.topic))
        if not current:
            return
        if reply is None:
            self._append(transcript.oracle_error_message())
            return

        self._append(transcript.teacher_message(self._apply_grade(reply)))
        await self._check_game_over()

    # ==========================================================================
    # Flows
    # ==========================================================================

    async def _start_training(self) -> None:
        """Enter TRAINING with a clean-slate history and teacher context."""
        self.session.mode = SessionMode.TRAINING
        self.oracle.reset()
        reply, current = await self._consult(get_training_start_prompt(self.topic))
        if not current:
            return
        if reply is None:
            self.session.history = [transcript.oracle_error_message()]
            return

        self.session.history = [transcript.teacher_message(self._apply_grade(reply))]
        await self._check_game_over()

    async def _training_exchange(self, text: str) -> None:
        self._append(transcript.user_message(text))
        reply, current = await self._consult(text)
        if not current:
            return
        if reply is None:
            self._append(transcript.oracle_error_message())
            return

        self._append(transcript.teacher_message(self._apply_grade(reply)))
        await self._check_game_over()

    async def _hint(self, text: str) -> None:
        """Charge for a hint up front, then fetch it ungraded."""
        self._append(transcript.user_message(text))
        self._charge_hint()

        if self.session.is_game_over:
            # The charge emptied the life pool: no hint on a halted episode
            await self._check_game_over()
            return

        reply, current = await self._consult(get_hint_prompt())
        if not current:
            return
        if reply is None:
            self._append(transcript.oracle_error_message())
            return

        self._append(transcript.teacher_message(reply))

    # ==========================================================================
    # Economy
    # ==========================================================================

    def _charge_hint(self) -> None:
        economy = self.config.economy
        if self.session.score >= economy.hint_score_cost:
            self.session.score -= economy.hint_score_cost
            log.info("hint_charged", cost_type="score", score=self.session.score)
        else:
            self.session.lives = max(0.0, self.session.lives - economy.hint_life_cost)
            log.info("hint_charged", cost_type="lives", lives=self.session.lives)

    def _apply_grade(self, raw_reply: str) -> str:
        """Classify a graded reply, apply its effects and return the clean text."""
        economy = self.config.economy
        result = classify(raw_reply)

        if result.failed:
            self.session.lives = max(0.0, self.session.lives - economy.fail_damage)
            self._emit(Cue.NEGATIVE)
        if result.passed:
            self.session.score += economy.pass_reward
            self._emit(Cue.POSITIVE)

        if result.graded:
            log.info(
                "reply_graded",
                passed=result.passed,
                failed=result.failed,
                lives=self.session.lives,
                score=self.session.score,
            )
        return result.text

    async def _check_game_over(self) -> None:
        """Take the ACTIVE -> HALTED edge once lives run out."""
        if not self.session.is_game_over:
            return
        if self.session.episode is EpisodeState.HALTED:
            return

        self.session.episode = EpisodeState.HALTED
        if not self.session.logged_in:
            return

        generation = self.session.generation
        entry = LeaderboardEntry(
            name=self.session.identifier or self.config.leaderboard.placeholder_name,
            score=self.session.score,
        )
        self._leaderboard = merge_entry(
            self._leaderboard, entry, self.config.leaderboard.size
        )
        try:
            await self.leaderboard_store.save_leaderboard(self._leaderboard)
        except PersistenceError as e:
            log.error("leaderboard_persist_failed", error=e.message)

        log.info("game_over_committed", name=entry.name, score=entry.score)
        if self.session.generation != generation:
            # Restarted or logged out while saving: the new episode keeps its slate
            log.info("stale_game_over_notice_dropped", generation=generation)
            return
        self._append(transcript.game_over_message(self._leaderboard, entry.score))

    # ==========================================================================
    # Helpers
    # ==========================================================================

    async def _consult(self, prompt: str) -> Tuple[Optional[str], bool]:
        """
        Send one prompt to the oracle while holding the busy flag.

        Returns:
            Tuple of (reply or None on OracleFailure, whether the session
            is still the one that issued the request)
        """
        assert not self.session.busy, "oracle request already outstanding"

        generation = self.session.generation
        self.session.busy = True
        reply: Optional[str] = None
        try:
            reply = await self.oracle.send(prompt)
        except OracleFailure as e:
            log.warning(
                "oracle_call_failed", error_type=type(e).__name__, error=e.message
            )
        finally:
            if self.session.generation == generation:
                self.session.busy = False

        current = self.session.generation == generation
        if not current:
            log.info("stale_oracle_reply_dropped", generation=generation)
        return reply, current

    def _append(self, message: Message) -> None:
        self.session.history.append(message)

    def _emit(self, cue: Cue) -> None:
        self.last_cue = cue
        log.debug("cue_emitted", cue=cue.value)
        if self.cue_listener is not None:
            self.cue_listener(cue)

    def _require_login(self) -> None:
        if not self.session.logged_in:
            raise NotLoggedInError("Log in before sending commands")

    def _require_idle(self) -> None:
        if self.session.busy:
            raise SessionBusyError("Wait for the instructor to answer first")
