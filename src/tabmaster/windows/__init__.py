"""tabmaster.windows package: window names, history, merging and views."""
