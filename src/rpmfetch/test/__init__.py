"""Test support code shared by rpmfetch's test suite."""
