#!/usr/bin/env python3
"""
Main application runner for the estimator pricing server.
"""

import os
import sys
import argparse
from pathlib import Path
import logging

def setup_logging(debug: bool = False):
    """Setup consistent logging format"""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler('app.log')
        ],
        force=True
    )

def reset_config_if_requested(args):
    """Delete the pricing config file if --reset-config flag is provided"""
    if not args.reset_config:
        return

    if args.config:
        config_path = Path(args.config)
    else:
        config_path = Path.home() / 'AppData' / 'Roaming' / 'PrintEstimator' / 'pricing_config.json'

    if config_path.exists():
        print(f"🔄 Resetting pricing configuration at {config_path}")
        try:
            config_path.unlink()
            print("✅ Configuration reset successfully")
        except OSError as e:
            print(f"❌ Error resetting configuration: {e}")
            sys.exit(1)

def main():
    """Main application entry point"""
    parser = argparse.ArgumentParser(description='Print Estimator Pricing Server')
    parser.add_argument('--reset-config', action='store_true', help='Restore the default pricing configuration before running')
    parser.add_argument('--config', type=str, default=None, help='Path to the pricing configuration JSON file')
    parser.add_argument('--port', type=int, default=5000, help='Port to run the server on')
    parser.add_argument('--host', type=str, default='localhost', help='Host to run the server on')
    parser.add_argument('--debug', action='store_true', help='Run in debug mode')

    args = parser.parse_args()

    setup_logging(args.debug)
    reset_config_if_requested(args)

    try:
        print("🚀 Starting Print Estimator Pricing Server")
        print("=" * 70)

        sys.path.append(str(Path(__file__).parent.parent))
        from backend.app import App

        server = App(config_file_path=args.config)

        print(f"🌐 Starting server on http://{args.host}:{args.port}")
        print("📝 Available API endpoints:")
        print("   💴 Pricing:")
        print("      POST /api/unit-prices")
        print("      POST /api/estimate")
        print("      POST /api/export-estimate")
        print("      POST /api/cleanup-session")
        print("      GET  /api/download/<filename>")
        print("")
        print("   ⚙️ Configuration:")
        print("      GET  /api/config/inquiry")
        print("      POST /api/config/update")
        print("      POST /api/config/reset")
        print("=" * 70)

        # Use 0.0.0.0 for Docker compatibility, localhost for local dev
        host = "0.0.0.0" if os.getenv('FLASK_ENV') == 'production' else args.host
        server.run(host=host, port=args.port, debug=args.debug)

    except ImportError as e:
        print(f"❌ Import error: {e}")
        sys.exit(1)

    except Exception as e:
        print(f"❌ Error running server: {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)

if __name__ == "__main__":
    main()
