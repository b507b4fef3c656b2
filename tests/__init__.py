"""MQTT HASS Test Suite.

Test Organization:
    tests/
        unit/               - Unit tests
            mqtt_hass/      - Library tests
                core/       - Registry, transport and config tests
                entities/   - Entity kind and discovery payload tests
                utils/      - Formatting and platform helper tests
            test_main.py    - Demo agent tests
        conftest.py         - Pytest configuration and global fixtures

Running Tests:
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=mqtt_hass --cov-report=html

    # Run specific test file
    pytest tests/unit/mqtt_hass/core/test_registry.py

    # Run with verbose output
    pytest -v
"""
