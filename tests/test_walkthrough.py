import logging

from relwrangle import walkthrough


def test_join_examples():
    results = walkthrough.join_examples()

    assert results['inner'].height == 1
    assert results['left'].height == 2
    assert results['right'].height == 2
    assert results['full'].height == 3
    assert results['anti'].height == 1
    assert results['chained'].height == 4
    assert results['multi_key'].height == 4


def test_inventory_examples():
    results = walkthrough.inventory_examples()

    assert results['chem_station'].column('latitude') == [34.2, 34.1]
    assert results['chem_nohab'].column('stationcode') == ['Y']


def test_string_examples():
    results = walkthrough.string_examples()

    assert results['fruit_strings']['first'].to_list() == [' ', 'f', 'g', 't']
    assert results['fruit_filter']['id'].to_list() == ['a', 'a']


def test_chemistry_examples():
    results = walkthrough.chemistry_examples()

    assert results['chem_clean'].column('analyte') == ['tn', 'tp', 'tn', 'tp']
    assert results['chem_right'].column('stationcode') == ['B', 'B', 'C']
    assert results['clean_inner'].column('replicate') == ['2', '2']


def test_main_sets_up_logging(monkeypatch):
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level

    monkeypatch.setenv('RELWRANGLE_LOGLEVEL', 'warning')
    try:
        walkthrough.main()

        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    finally:
        root.handlers[:] = handlers
        root.setLevel(level)
