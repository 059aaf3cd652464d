from streamlit.testing.v1 import AppTest

PAGE = "../pages/1_Simulation.py"


def run_page(**values):
    at = AppTest.from_file(PAGE, default_timeout=120)
    at.run()
    for key, value in values.items():
        at.number_input(key=key).set_value(value)
    at.sidebar.button[0].click().run()
    return at


def test_price_inputs_cannot_go_negative():
    at = AppTest.from_file(PAGE, default_timeout=120)
    at.run()

    assert not at.exception
    assert at.number_input(key="initial_mint_price").min == 0.0
    assert at.number_input(key="price_per_period").min == 0.0
    # Projection inputs are on the sidebar before the run is requested
    assert at.slider(key="annual_growth_multiple").value == 10.0


def test_simulation_renders_all_tabs():
    at = run_page(months=3)

    assert not at.exception
    assert not at.error
    assert len(at.tabs) == 4


def test_free_tier_projection_reports_error():
    # Mint fees keep the simulated ROI defined while the projection has no spend
    at = run_page(months=3, initial_mint_price=10.0, price_per_period=0.0)

    assert not at.exception
    assert len(at.tabs) == 4
    assert any("ROI is undefined" in e.value for e in at.error)
