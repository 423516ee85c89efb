import random

import pytest

from conftest import make_catalog, make_room
from pmtrumps.errors import InvalidTransition
from pmtrumps.models import PendingOutcome, Player, Room
from pmtrumps.services.game.dealer import Dealer, deal_round_robin
from pmtrumps.services.game.shuffle import Shuffler


def seeded_dealer(seed=7):
    return Dealer(Shuffler(random.Random(seed)))


def all_cards(room):
    cards = [c for p in room.players for c in p.deck]
    return cards + list(room.tie_pile) + list(room.unused_pile)


def test_shuffler_returns_copy_and_keeps_input():
    items = list(range(20))
    out = Shuffler(random.Random(3)).shuffled(items)
    assert items == list(range(20))
    assert sorted(out) == items


def test_shuffler_is_deterministic_with_seed():
    a = Shuffler(random.Random(99)).shuffled(range(30))
    b = Shuffler(random.Random(99)).shuffled(range(30))
    assert a == b


def test_round_robin_order_and_remainder():
    players = [Player(id=1, name='A'), Player(id=2, name='B')]
    leftover = deal_round_robin(['c0', 'c1', 'c2', 'c3', 'c4'], players)
    assert players[0].deck == ['c0', 'c2']
    assert players[1].deck == ['c1', 'c3']
    assert leftover == ['c4']


def test_initial_deal_53_cards_4_players():
    catalog = make_catalog(53)
    room = Room(code='ABCDE', players=[Player(id=i, name=f'P{i}') for i in range(1, 5)])
    seeded_dealer().deal_initial(room, catalog)

    assert [len(p.deck) for p in room.players] == [13, 13, 13, 13]
    assert len(room.unused_pile) == 1
    assert room.total_dealt == 52
    assert room.dealt is True
    assert room.card_count() == 53
    assert {id(c) for c in all_cards(room)} == {id(c) for c in catalog}


def test_initial_deal_does_not_mutate_catalog():
    catalog = make_catalog(10)
    before = list(catalog)
    room = Room(code='ABCDE', players=[Player(id=1, name='A'), Player(id=2, name='B')])
    seeded_dealer().deal_initial(room, catalog)
    assert catalog == before


def test_initial_deal_with_no_players_is_noop():
    room = Room(code='ABCDE')
    seeded_dealer().deal_initial(room, make_catalog(5))
    assert room.dealt is False
    assert room.unused_pile == []


def test_rebalance_preserves_top_cards_and_conserves():
    catalog = make_catalog(20)
    room = Room(code='ABCDE', players=[Player(id=1, name='A'), Player(id=2, name='B')])
    dealer = seeded_dealer()
    dealer.deal_initial(room, catalog)
    tops = [p.deck[0] for p in room.players]

    room.players.append(Player(id=3, name='C'))
    dealer.rebalance(room)

    assert [p.deck[0] for p in room.players[:2]] == tops
    assert all(p.deck for p in room.players)
    assert room.card_count() == 20
    assert len({id(c) for c in all_cards(room)}) == 20
    sizes = [len(p.deck) for p in room.players]
    assert max(sizes) - min(sizes) <= 1
    assert room.total_dealt == sum(sizes)


def test_rebalance_pulls_in_unused_pile():
    catalog = make_catalog(7)
    room = Room(code='ABCDE', players=[Player(id=1, name='A'), Player(id=2, name='B')])
    dealer = seeded_dealer()
    dealer.deal_initial(room, catalog)
    assert len(room.unused_pile) == 1

    room.players.append(Player(id=3, name='C'))
    dealer.rebalance(room)
    # 3 preserved/assigned tops + 4 pooled cards dealt evenly, 1 left over
    assert [len(p.deck) for p in room.players] == [2, 2, 2]
    assert len(room.unused_pile) == 1
    assert room.card_count() == 7


def test_rebalance_gives_empty_player_a_top_card():
    cards = make_catalog(6)
    room = make_room(cards[:5], [])
    room.players.append(Player(id=3, name='C'))
    seeded_dealer().rebalance(room)

    assert room.players[0].deck[0] is cards[0]
    assert room.players[1].deck
    assert room.players[2].deck
    assert room.card_count() == 5


def test_rebalance_leaves_tie_pile_alone():
    cards = make_catalog(8)
    room = make_room(cards[0:3], cards[3:6])
    room.tie_pile = [cards[6], cards[7]]
    room.players.append(Player(id=3, name='C'))
    seeded_dealer().rebalance(room)

    assert room.tie_pile == [cards[6], cards[7]]
    assert room.card_count() == 8
    # Cards waiting in the tie pile still count toward the champion total
    assert sum(len(p.deck) for p in room.players) == 6
    assert room.total_dealt == 8


def test_rebalance_refused_while_awaiting_commit():
    cards = make_catalog(4)
    room = make_room(cards[:2], cards[2:])
    room.pending_outcome = PendingOutcome(winner_index=0, stat='Age')
    with pytest.raises(InvalidTransition):
        seeded_dealer().rebalance(room)
    assert room.players[0].deck == cards[:2]
