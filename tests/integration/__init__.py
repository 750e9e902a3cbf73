"""Integration tests for swimlane-layout: whole-pipeline builds over generated datasets."""
