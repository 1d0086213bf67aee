"""tabmaster.llm package: model clients used by the assist features."""
