"""
main_cli.py
Unified Entry Point for the Trading Journal analytics.
Modes:
 - Interactive (Human): Standard Shell
 - Bot (JSON): Input via args, output via stdout (JSON)
"""
import sys
import argparse
from py_cli.models import CLIMode
from py_cli.controller import CLIController
from py_analytics.config import load_config
# Import handlers to trigger registration
import py_cli.handlers_analytics
import py_cli.handlers_tools

def main():
    parser = argparse.ArgumentParser(description="Trading Journal Analytics CLI")
    parser.add_argument("--mode", choices=["human", "bot"], default="human", help="Operating Mode")
    parser.add_argument("--journal", default="data/journal.json", help="Journal JSON file or directory of trade JSONs")
    parser.add_argument("--config", default="config/analytics.json", help="Analytics config (JSON)")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command to execute")

    args = parser.parse_args()

    # 1. Setup Context
    mode = CLIMode.BOT if args.mode == "bot" else CLIMode.HUMAN
    controller = CLIController(mode=mode, journal_path=args.journal)
    controller.context.config = load_config(args.config)

    # 2. Execution
    # If arguments are provided, execute single command and exit
    if args.command:
        # e.g. ['groups', 'symbol'] -> "groups symbol"
        input_str = " ".join(args.command)
        response = controller.process_input(input_str)
        print(response)
        return

    # 3. Interactive Loop (Only for Human Mode)
    if mode == CLIMode.HUMAN:
        print(f"📒 Journal CLI (Mode: {mode.value}, Journal: {args.journal})")
        print("Type 'help' for commands, 'exit' or 'quit' to stop.")
        while True:
            try:
                user_input = input(">> ")
                if user_input.lower() in ["exit", "quit"]:
                    break

                response = controller.process_input(user_input)
                print(response)
            except (KeyboardInterrupt, EOFError):
                print("\nExiting...")
                break
    else:
        print('{"success": false, "message": "No command provided", "error_code": "NO_INPUT"}')
        sys.exit(1)

if __name__ == "__main__":
    main()
