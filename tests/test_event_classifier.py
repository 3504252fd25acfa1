from event_classifier import classify_event, extract_candidate_address

from conftest import MINT_A, MINT_B, MINT_C, PROGRAM_ID, mint_event


def test_mint_event_from_program_returns_address():
    assert classify_event(mint_event(), PROGRAM_ID) == MINT_A


def test_other_event_type_is_rejected():
    assert classify_event(mint_event(type="OTHER"), PROGRAM_ID) is None


def test_event_without_tracked_program_is_rejected():
    event = mint_event(programId="SomeOtherProgram1111111111111111111111111", accounts=[MINT_A])
    assert classify_event(event, PROGRAM_ID) is None


def test_program_found_in_account_list_only():
    event = mint_event(programId=None)
    assert classify_event(event, PROGRAM_ID) == MINT_A


def test_balance_change_mint_used_when_no_explicit_mint():
    event = mint_event(tokenMint=None, accounts=[MINT_C, PROGRAM_ID], accountData=[
        {"account": MINT_C, "tokenBalanceChanges": [{"mint": "short"}, {"mint": MINT_B}]},
    ])
    assert extract_candidate_address(event) == MINT_B
    assert classify_event(event, PROGRAM_ID) == MINT_B


def test_falls_back_to_first_account():
    event = mint_event(tokenMint=None, accounts=[MINT_C, PROGRAM_ID])
    assert classify_event(event, PROGRAM_ID) == MINT_C


def test_address_with_bad_length_is_rejected():
    assert classify_event(mint_event(address="TEST_TOKEN_ADDRESS"), PROGRAM_ID) is None
    assert classify_event(mint_event(address="x" * 46), PROGRAM_ID) is None


def test_non_dict_event_is_rejected():
    assert classify_event("TOKEN_MINT", PROGRAM_ID) is None
