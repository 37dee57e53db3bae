import argparse
import io
import random

from salvo import config
from salvo.cli import cmd_act, cmd_new, cmd_play, main
from salvo.grid import GRID_SIZE


def _args(**kwargs):
    kwargs.setdefault("rng", random.Random(0))
    return argparse.Namespace(**kwargs)


def _opening_token():
    out = io.StringIO()
    assert cmd_new(_args(player_1=1, player_2=2), out) == 0
    return out.getvalue().splitlines()[-1]


def test_new_prints_token():
    out = io.StringIO()
    assert cmd_new(_args(player_1=1, player_2=2), out) == 0
    text = out.getvalue()
    assert "get ready for battle" in text
    assert text.splitlines()[-1].startswith(config.TOKEN_PREFIX + "P")


def test_new_same_player():
    out = io.StringIO()
    assert cmd_new(_args(player_1=3, player_2=3), out) == 1
    assert out.getvalue().startswith("ERR")


def test_act_place():
    out = io.StringIO()
    code = cmd_act(_args(user=1, token=_opening_token(), coordinate=None, show=True), out)
    text = out.getvalue()
    assert code == 0
    assert "is this fleet okay?" in text
    assert "CONFIRM_PLACE: " + config.TOKEN_PREFIX + "C" in text
    assert "[Own]" in text


def test_act_wrong_user():
    out = io.StringIO()
    assert cmd_act(_args(user=2, token=_opening_token(), coordinate=None, show=False), out) == 0
    assert "It is not your turn." in out.getvalue()


def test_act_garbage():
    out = io.StringIO()
    assert cmd_act(_args(user=1, token="nope", coordinate=None, show=False), out) == 1
    assert "Ignored interaction (UnrecognizedPrefix)" in out.getvalue()


class Script:
    """Answers prompts: accept the first control, fire at cells in order."""

    def __init__(self):
        cells = [f"{chr(ord('A') + x)}{y + 1}" for y in range(GRID_SIZE) for x in range(GRID_SIZE)]
        self.targets = {}
        self.cells = cells
        self.prompts = 0

    def __call__(self, prompt):
        self.prompts += 1
        actor, _, rest = prompt.partition("> ")
        if rest.startswith("target"):
            queue = self.targets.setdefault(actor, list(self.cells))
            return queue.pop(0)
        return "1"


def test_play_full_game():
    out = io.StringIO()
    script = Script()
    assert cmd_play(_args(player_1=1, player_2=2, rng=random.Random(5)), out, read=script) == 0
    text = out.getvalue()
    assert "wins!" in text
    assert "[Enemy]" in text
    # placement (4) + up to 2 * 100 shots of three prompts each
    assert script.prompts <= 4 + 3 * 2 * GRID_SIZE * GRID_SIZE


def test_play_stops_on_eof():
    def read(prompt):
        raise EOFError

    out = io.StringIO()
    assert cmd_play(_args(player_1=1, player_2=2), out, read=read) == 0


def test_play_retries_bad_choice():
    answers = iter(["9", "x"])

    def read(prompt):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError from None

    out = io.StringIO()
    assert cmd_play(_args(player_1=1, player_2=2), out, read=read) == 0
    assert out.getvalue().count("ERR pick one") == 2


def test_main_new(capsys):
    assert main(["-q", "--seed", "7", "new", "10", "20"]) == 0
    assert capsys.readouterr().out.splitlines()[-1].startswith(config.TOKEN_PREFIX)


def test_play_same_player():
    def read(prompt):
        raise AssertionError("no prompt expected")

    out = io.StringIO()
    assert cmd_play(_args(player_1=5, player_2=5), out, read=read) == 1
    assert out.getvalue().startswith("ERR cannot start game: same_player")
