"""Resolution engine: choose and apply one action for a divergent pair."""

from __future__ import annotations

from collections.abc import Callable

from jjreconcile.core.config import RunMode
from jjreconcile.core.confirm import Confirmation, ConfirmationGate
from jjreconcile.core.console import Console
from jjreconcile.core.errors import (
    EmptySelectionError,
    UnattendedLogicError,
    UserCancelled,
)
from jjreconcile.core.log import logger
from jjreconcile.core.model import (
    Assessment,
    DivergentPair,
    ResolutionAction,
    Transition,
)
from jjreconcile.jj.base import Repository

# Menu key, action, label
MENU = [
    ("AL", ResolutionAction.ABANDON_LEFT, "Abandon left"),
    ("AR", ResolutionAction.ABANDON_RIGHT, "Abandon right"),
    ("SL", ResolutionAction.SQUASH_LEFT_INTO_RIGHT,
     "Squash left into right"),
    ("SR", ResolutionAction.SQUASH_RIGHT_INTO_LEFT,
     "Squash right into left"),
    ("P", ResolutionAction.PRINT_STACK, "Print stack"),
    ("R", ResolutionAction.REFRESH, "Refresh (restart from beginning)"),
    ("I", ResolutionAction.SHOW_INTERDIFF, "Show interdiff"),
    ("DL", ResolutionAction.SHOW_DIFF_LEFT, "Show diff of left commit"),
    ("DR", ResolutionAction.SHOW_DIFF_RIGHT, "Show diff of right commit"),
]

_MENU_KEYS = {key: action for key, action, _label in MENU}


def parse_menu_choice(answer: str) -> ResolutionAction | None:
    """Map a menu key (any case) or action value to an action."""
    text = answer.strip()
    action = _MENU_KEYS.get(text.upper())
    if action is not None:
        return action
    try:
        return ResolutionAction(text.lower())
    except ValueError:
        return None


def prompt_for_action(console: Console) -> ResolutionAction:
    """Show the menu and block until a valid choice is made.

    Raises:
        UserCancelled: If input is closed
    """
    console.show("\nWhat would you like to do?")
    for key, _action, label in MENU:
        console.show(f"{key}. {label}")

    while True:
        action = parse_menu_choice(console.ask("Choose an option: "))
        if action is not None:
            return action
        console.show("Invalid action.")


def choose_automatic_action(
    assessment: Assessment, mode: RunMode
) -> ResolutionAction | None:
    """Pick an action without asking, or None to fall back to the menu.

    Only an empty interdiff in auto mode is resolved automatically:
    no issues squashes left into right, conflicts without merges
    abandon left. Merge commits always go to the menu because their
    history may hold merge resolutions.
    """
    if not mode.auto or not assessment.interdiff_is_empty:
        return None
    if not assessment.has_issues:
        return ResolutionAction.SQUASH_LEFT_INTO_RIGHT
    if assessment.has_conflicts and not assessment.has_merge_commits:
        return ResolutionAction.ABANDON_LEFT
    return None


class ResolutionEngine:
    """Applies resolution actions through the repository."""

    def __init__(self, repository: Repository, console: Console,
                 mode: RunMode):
        self.repository = repository
        self.console = console
        self.mode = mode
        self.gate = ConfirmationGate(console, enabled=mode.safe)

    def apply(
        self, action: ResolutionAction, pair: DivergentPair
    ) -> Transition:
        """Apply one action.

        Returns:
            RESTART after a mutation or refresh, CONTINUE after an
            informational action

        Raises:
            UserCancelled: If the operator declined a confirmation;
                the repository is unchanged unless an earlier step
                of the same action already ran
            MutationError: If a jj command failed
        """
        return self._apply(action, pair, self.gate)

    def apply_automatic(
        self, action: ResolutionAction, pair: DivergentPair
    ) -> Transition:
        """Apply an automatically chosen action without confirmations.

        Raises:
            UnattendedLogicError: If the action did not restart the loop
        """
        logger.info("Applying automatic action", action=action.value)
        transition = self._apply(
            action, pair, ConfirmationGate(self.console, enabled=False)
        )
        if transition is not Transition.RESTART:
            raise UnattendedLogicError(
                f"Automatic action {action.value} should have triggered "
                f"a restart, got {transition.value}"
            )
        return transition

    def _apply(
        self,
        action: ResolutionAction,
        pair: DivergentPair,
        gate: ConfirmationGate,
    ) -> Transition:
        left = pair.left.commit_id
        right = pair.right.commit_id

        if action is ResolutionAction.ABANDON_LEFT:
            return self._abandon(gate, "left", left, right)
        elif action is ResolutionAction.ABANDON_RIGHT:
            return self._abandon(gate, "right", right, left)
        elif action is ResolutionAction.SQUASH_LEFT_INTO_RIGHT:
            return self._squash(gate, "left", "right", left, right)
        elif action is ResolutionAction.SQUASH_RIGHT_INTO_LEFT:
            return self._squash(gate, "right", "left", right, left)
        elif action is ResolutionAction.PRINT_STACK:
            self.console.show(self.repository.stack().rstrip())
            return Transition.CONTINUE
        elif action is ResolutionAction.REFRESH:
            self.console.show("\nRefreshing state...")
            return Transition.RESTART
        elif action is ResolutionAction.SHOW_INTERDIFF:
            # Plain jj output even in auto mode
            output = self.repository.interdiff(
                left, right, use_external_tool=False
            )
            self.console.show("\nInterdiff:")
            self.console.show(output.rstrip() or "(empty)")
            return Transition.CONTINUE
        elif action is ResolutionAction.SHOW_DIFF_LEFT:
            self._show_diff(left)
            return Transition.CONTINUE
        elif action is ResolutionAction.SHOW_DIFF_RIGHT:
            self._show_diff(right)
            return Transition.CONTINUE

        raise ValueError(f"Unhandled action: {action}")

    def _abandon(
        self, gate: ConfirmationGate, side: str, loser: str, winner: str
    ) -> Transition:
        if not gate.confirm(f"Abandon {side} commit ({loser})?"):
            raise UserCancelled(f"Abandon {side} cancelled")

        self._show_current_operation()
        self._rebase_descendants(gate, loser, winner)
        self._step(
            gate,
            f"Abandon commit {loser}",
            self.repository.abandon,
            loser,
        )
        return self._finish_mutation()

    def _squash(
        self,
        gate: ConfirmationGate,
        source_side: str,
        destination_side: str,
        source: str,
        destination: str,
    ) -> Transition:
        if not gate.confirm(
            f"Squash {source_side} commit ({source}) into "
            f"{destination_side} ({destination})?"
        ):
            raise UserCancelled(
                f"Squash {source_side} into {destination_side} cancelled"
            )

        self._show_current_operation()
        self._rebase_descendants(gate, source, destination)
        self._step(
            gate,
            f"Squash commit {source} into {destination}",
            self.repository.squash,
            source,
            destination,
        )
        return self._finish_mutation()

    def _rebase_descendants(
        self, gate: ConfirmationGate, root: str, destination: str
    ) -> None:
        """Move root's descendants onto destination, if it has any."""
        try:
            self._step(
                gate,
                f"Rebase commit sequence {root} onto {destination}",
                self.repository.rebase,
                root,
                destination,
            )
        except EmptySelectionError:
            logger.info(
                "No commits to rebase (empty revision set) - continuing",
                root=root,
            )

    def _step(
        self,
        gate: ConfirmationGate,
        description: str,
        operation: Callable[..., str],
        *args: str,
    ) -> str:
        """Run one underlying operation behind the gate.

        SKIP makes this step a no-op; CANCEL aborts the whole action.
        """
        answer = gate.check(description)
        if answer is Confirmation.CANCEL:
            raise UserCancelled(f"{description} cancelled by user")
        if answer is Confirmation.SKIP:
            logger.info("Command skipped", step=description)
            self.console.show("Command skipped")
            return ""

        output = operation(*args)
        if output.strip():
            self.console.show(output.rstrip())
        return output

    def _show_current_operation(self) -> None:
        self.console.show("Current operation:")
        self.console.show(self.repository.current_operation().rstrip())

    def _show_diff(self, revision: str) -> None:
        self.console.show(f"\nDiff of commit {revision}:")
        self.console.show(self.repository.diff(revision).rstrip())

    def _finish_mutation(self) -> Transition:
        self.console.show("\nUpdated stack:")
        self.console.show(self.repository.stack().rstrip())
        self.console.show(
            "\nRestarting from beginning due to state changes..."
        )
        return Transition.RESTART
