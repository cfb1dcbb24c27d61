"""hashstream command-line interface."""
