"""
Tests pour le registre des votes (service).
"""
from datetime import datetime, timedelta, timezone

import pytest

from tripvote.errors import AlreadyVoted, DeadlineExpired, InvalidReference, NotFound
from tripvote.models_vote import Vote
from tripvote.services import vote_ledger
from tripvote.services.vote_ledger import as_utc, cast_vote, is_voting_open


def test_cast_vote_creates_single_vote(db, employee, make_destination):
    """Un premier vote est enregistré et renvoyé."""
    dest = make_destination()
    vote = cast_vote(db, employee.id, dest.id)

    assert vote.id is not None
    assert vote.user_id == employee.id
    assert vote.destination_id == dest.id
    assert db.query(Vote).count() == 1


def test_cast_vote_accepts_numeric_string_id(db, employee, make_destination):
    """Un identifiant sous forme de chaîne numérique est accepté."""
    dest = make_destination()
    vote = cast_vote(db, employee.id, str(dest.id))
    assert vote.destination_id == dest.id


def test_second_vote_same_destination_rejected(db, employee, make_destination):
    """Voter deux fois pour la même destination lève AlreadyVoted."""
    dest = make_destination()
    cast_vote(db, employee.id, dest.id)

    with pytest.raises(AlreadyVoted):
        cast_vote(db, employee.id, dest.id)
    assert db.query(Vote).count() == 1


def test_second_vote_other_destination_rejected(db, employee, make_destination):
    """Un seul vote par utilisateur, quelle que soit la destination."""
    d1 = make_destination(name="Mountain Retreat")
    d2 = make_destination(name="Beach Paradise")
    cast_vote(db, employee.id, d1.id)

    with pytest.raises(AlreadyVoted):
        cast_vote(db, employee.id, d2.id)

    votes = db.query(Vote).all()
    assert len(votes) == 1
    assert votes[0].destination_id == d1.id


def test_session_usable_after_duplicate(db, employee, make_user, make_destination):
    """Après un doublon, la session reste utilisable (rollback effectué)."""
    dest = make_destination()
    cast_vote(db, employee.id, dest.id)
    with pytest.raises(AlreadyVoted):
        cast_vote(db, employee.id, dest.id)

    other = make_user()
    vote = cast_vote(db, other.id, dest.id)
    assert vote.user_id == other.id
    assert db.query(Vote).count() == 2


@pytest.mark.parametrize("raw", ["abc", "", "12abc", "-3", "0", 0, -1, 1.5, None, True, [1], {"id": 1}, "٣", str(2 ** 64)])
def test_malformed_destination_id(db, employee, raw):
    """Les identifiants mal formés lèvent InvalidReference."""
    with pytest.raises(InvalidReference):
        cast_vote(db, employee.id, raw)


def test_unknown_destination(db, employee, make_destination):
    """Un identifiant bien formé mais inconnu lève NotFound."""
    make_destination()
    with pytest.raises(NotFound):
        cast_vote(db, employee.id, 9999)
    assert db.query(Vote).count() == 0


def test_deadline_passed_rejects_first_time_voter(db, employee, make_destination):
    """Échéance dépassée d'une seconde : DeadlineExpired, même pour un premier vote."""
    dest = make_destination(deadline_in=timedelta(seconds=-1))
    with pytest.raises(DeadlineExpired):
        cast_vote(db, employee.id, dest.id)
    assert db.query(Vote).count() == 0


def test_deadline_checked_before_duplicate(db, employee, make_destination):
    """Un votant ayant déjà voté reçoit DeadlineExpired sur une destination fermée."""
    open_dest = make_destination(name="Open")
    closed = make_destination(name="Closed", deadline_in=timedelta(hours=-2))
    cast_vote(db, employee.id, open_dest.id)

    with pytest.raises(DeadlineExpired):
        cast_vote(db, employee.id, closed.id)


def test_future_deadline_accepts_vote(db, employee, make_destination):
    dest = make_destination(deadline_in=timedelta(days=3))
    assert cast_vote(db, employee.id, dest.id).destination_id == dest.id


def test_vote_at_exact_deadline_accepted(db, employee, make_destination):
    """Le vote est encore ouvert à l'instant exact de l'échéance."""
    deadline = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
    dest = make_destination(deadline=deadline)

    vote = cast_vote(db, employee.id, dest.id, now=deadline)
    assert vote.destination_id == dest.id


def test_vote_just_after_deadline_rejected(db, employee, make_destination):
    deadline = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
    dest = make_destination(deadline=deadline)

    with pytest.raises(DeadlineExpired):
        cast_vote(db, employee.id, dest.id, now=deadline + timedelta(microseconds=1))


def test_is_voting_open():
    """Statut ouvert/fermé calculé à partir de l'échéance."""
    now = datetime(2030, 6, 1, tzinfo=timezone.utc)
    assert is_voting_open(None, now) is True
    assert is_voting_open(now + timedelta(seconds=1), now) is True
    assert is_voting_open(now, now) is True
    assert is_voting_open(now - timedelta(seconds=1), now) is False


def test_is_voting_open_naive_deadline_is_utc():
    """Une échéance naïve (relue depuis SQLite) est interprétée en UTC."""
    now = datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)
    assert is_voting_open(datetime(2030, 6, 1, 11, 59), now) is False
    assert is_voting_open(datetime(2030, 6, 1, 12, 1), now) is True


def test_as_utc_converts_offsets():
    paris = timezone(timedelta(hours=2))
    value = as_utc(datetime(2030, 6, 1, 14, 0, tzinfo=paris))
    assert value == datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)
    assert value.tzinfo == timezone.utc
    assert as_utc(None) is None


def test_get_my_vote_empty(db, employee):
    """Aucun vote : None, pas d'erreur."""
    assert vote_ledger.get_my_vote(db, employee.id) is None
    assert vote_ledger.get_voted_destination_id(db, employee.id) is None


def test_get_my_vote_loads_destination(db, employee, make_destination):
    dest = make_destination(name="Urban Exploration", location="New York City, NY")
    cast_vote(db, employee.id, dest.id)

    vote = vote_ledger.get_my_vote(db, employee.id)
    assert vote.destination.name == "Urban Exploration"
    assert vote_ledger.get_voted_destination_id(db, employee.id) == dest.id


def test_delete_votes_for_destination(db, make_destination, add_votes):
    """Suppression en masse des votes d'une destination, sans toucher aux autres."""
    d1 = make_destination(name="A")
    d2 = make_destination(name="B")
    add_votes(d1, 3)
    add_votes(d2, 2)

    removed = vote_ledger.delete_votes_for_destination(db, d1.id)
    db.commit()

    assert removed == 3
    assert db.query(Vote).filter(Vote.destination_id == d1.id).count() == 0
    assert db.query(Vote).filter(Vote.destination_id == d2.id).count() == 2
