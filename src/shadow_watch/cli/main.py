import dotenv
import fire

from shadow_watch.cli import files, issues, plan, tree

dotenv.load_dotenv()


class CLI:
    """Main CLI interface for Shadow Watch."""

    def __init__(self):
        self.format = issues.FormatCommands()
        self.files = files.FilesCommands()
        self.tree = tree.TreeCommands()
        self.plan = plan.PlanCommands()


def main():
    """Entry point for the CLI."""
    fire.Fire(CLI)


if __name__ == "__main__":
    main()
