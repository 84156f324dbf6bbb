from taixiu.core.symbols import encode, known_labels
from taixiu.models import Round

def test_label_mapping():
    r = Round.from_dice(6, 4, 1); assert r.total == 11 and r.result == 'Tài'
    r = Round.from_dice(1, 1, 1); assert r.total == 3 and r.result == 'Xỉu' and r.is_triple
    r = Round.from_dice(6, 6, 5); assert r.total == 17 and r.result == 'Tài'
    r = Round.from_dice(6, 6, 6); assert r.total == 18 and r.result == 'Xỉu'

def test_payload_aliases():
    r = Round.from_payload({'Phien': '123', 'Xuc_xac_1': 3, 'Xuc_xac_2': 4, 'Xuc_xac_3': 5, 'Ket_qua': 'Tài'})
    assert r.session == 123 and r.total == 12 and r.result == 'Tài'
    r = Round.from_payload({'id': 5, 'x1': 1, 'x2': 2, 'x3': 3, 'result': 'T'})
    assert r.session == 5 and r.dice == [1, 2, 3] and r.result == 'Tài'
    r = Round.from_payload({'d1': 2, 'd2': 2, 'd3': 2, 'Tong': 6, 'result': 'X'})
    assert r.total == 6 and r.result == 'Xỉu'

def test_bad_fields_become_none():
    r = Round.from_payload({'Phien': 'abc', 'd1': 9, 'd2': 2, 'd3': 3})
    assert r.session is None and r.d1 is None and r.total is None and r.result is None

def test_missing_outcome_encodes_as_xiu():
    rounds = [Round(result='Tài'), Round(), Round(result='Xỉu')]
    assert encode(rounds) == ['T', 'X', 'X']
    assert known_labels(rounds) == ['T', 'X']

def test_unparseable_total_falls_back_to_dice_sum():
    r = Round.from_payload({'Phien': 9, 'Xuc_xac_1': 1, 'Xuc_xac_2': 2, 'Xuc_xac_3': 4, 'Tong': 'n/a', 'Ket_qua': 'Xỉu'})
    assert r.session == 9 and r.total == 7 and r.result == 'Xỉu'
    r = Round.from_payload({'Phien': 10, 'Tong': '', 'Ket_qua': 'Tài'})
    assert r.total is None and r.result == 'Tài'
    r = Round.from_payload({'Phien': 11, 'Tong': ' 12 '})
    assert r.total == 12
    assert Round.from_payload({'Tong': 42}).total is None
