import pytest

from holdem_lab.core import table
from holdem_lab.core.config import SimulationConfig
from holdem_lab.core.sim import EquityEstimator
from holdem_lab.core.table import AnalysisFailed, HandSession, InvalidStage, Stage


def make_session(opponents=2):
    return HandSession.from_config(SimulationConfig(opponents=opponents, iterations=60, seed=12))


def test_start_hand_deals_distinct_cards():
    session = make_session(opponents=3)
    session.start_hand()
    assert session.stage == Stage.PREFLOP
    assert len(session.player_hole) == 2
    assert len(session.opponent_holes) == 3
    dealt = list(session.player_hole) + [card for hole in session.opponent_holes for card in hole]
    assert len(set(dealt)) == 8
    assert len(session.deck) == 44
    assert not set(dealt) & set(session.deck)


def test_advance_reveals_streets():
    session = make_session()
    session.start_hand()
    assert session.advance() == Stage.FLOP
    assert len(session.board) == 3
    assert session.advance() == Stage.TURN
    assert len(session.board) == 4
    assert session.advance() == Stage.RIVER
    assert len(session.board) == 5
    assert session.advance() == Stage.SHOWDOWN
    assert len(session.deck) == 52 - 6 - 5
    with pytest.raises(InvalidStage):
        session.advance()


def test_idle_session_cannot_act():
    session = make_session()
    with pytest.raises(InvalidStage):
        session.advance()
    with pytest.raises(InvalidStage):
        session.fold()
    with pytest.raises(InvalidStage):
        session.analyze()


def test_river_analysis_produces_results():
    session = make_session()
    session.start_hand()
    session.run_to_showdown()
    board = list(session.board)
    report = session.analyze()
    assert session.stage == Stage.RESULTS
    assert session.report is report
    assert list(report.board) == board
    assert len(report.opponent_hand_descriptions) == 2
    assert report.equities.river in (0, 50, 100)


def test_fold_preflop_runs_board_out(monkeypatch):
    boards = []
    original = EquityEstimator.estimate_equity

    def recording(self, player_hole, opponent_holes, board=(), iterations=None):
        boards.append(tuple(board))
        return original(self, player_hole, opponent_holes, board, iterations)

    monkeypatch.setattr(EquityEstimator, "estimate_equity", recording)
    session = make_session(opponents=1)
    session.start_hand()
    session.fold()
    assert session.stage == Stage.SHOWDOWN
    report = session.analyze()
    assert len(session.board) == 5
    assert boards == [(), tuple(session.board[:3]), tuple(session.board[:4])]
    assert 0 <= report.equities.flop <= 100
    assert 0 <= report.equities.turn <= 100


def test_analysis_failure_reverts_to_showdown(monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(table, "resolve_showdown", broken)
    session = make_session()
    session.start_hand()
    session.run_to_showdown()
    with pytest.raises(AnalysisFailed) as excinfo:
        session.analyze()
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert session.stage == Stage.SHOWDOWN
    assert session.report is None


def test_new_hand_discards_previous_report():
    session = make_session(opponents=1)
    session.start_hand()
    session.run_to_showdown()
    session.analyze()
    session.start_hand()
    assert session.report is None
    assert session.board == []
    assert session.stage == Stage.PREFLOP
