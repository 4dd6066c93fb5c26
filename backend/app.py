#!/usr/bin/env python3

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS
from pydantic import ValidationError
import os
import uuid
from datetime import datetime, timedelta
import logging
from werkzeug.utils import secure_filename
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple

# Add parent directory to path for imports
import sys
sys.path.append(str(Path(__file__).parent.parent))

from src.config.config_manager import ConfigManager
from src.estimator.estimate_processor import EstimateProcessor
from src.estimator.estimate_exporter import EstimateExporter
from src.estimator.unit_price_calculator import calculate_unit_prices
from models.base_models import GroupCost
from models.config_models import (
    ConfigUpdateRequest,
    ConfigInquiryResponse,
    ConfigUpdateResponse
)
from models.api_models import (
    UnitPricesRequest,
    UnitPricesResponse,
    EstimateRequest,
    EstimateResponse,
    ExportEstimateRequest,
    ExportEstimateResponse,
    CleanupSessionRequest,
    CleanupSessionResponse,
    ErrorResponse
)

logging.basicConfig(level=logging.DEBUG)


def _error(message: str, status: int, details: Optional[list] = None):
    return jsonify(ErrorResponse(error=message, details=details).model_dump(exclude_none=True)), status


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _validation_error(e: ValidationError):
    details = e.errors(include_url=False, include_context=False, include_input=False)
    return _error("Invalid request", 400, details)


class App:
    """Estimator pricing API: unit prices, estimates, exports and pricing configuration"""

    def __init__(self, config_file_path: Optional[str] = None, output_folder: Optional[str] = None,
                 session_ttl_minutes: int = 120):
        self.app = Flask(__name__)
        CORS(self.app)

        # Setup directories - repo root only
        self.app_root = Path(__file__).parent.parent.absolute()
        self.output_folder = output_folder or str(self.app_root / 'storage' / 'output')
        os.makedirs(self.output_folder, exist_ok=True)

        # Session management, unused sessions expire after session_ttl
        self.estimate_sessions = {}
        self.session_ttl = timedelta(minutes=session_ttl_minutes)

        # Configuration manager
        self.config_manager = ConfigManager(config_file_path)
        self._reload_processors()

        # Setup Flask routes
        self.setup_routes()

    def _reload_processors(self):
        """Rebuild the estimate processor and exporter from the current configuration"""
        config = self.config_manager.get_config()
        self.estimate_processor = EstimateProcessor(config)
        self.estimate_exporter = EstimateExporter(config.currency_symbol)
        logging.info("Estimate processor loaded with current configuration")

    def store_estimate_session(self, session_id: str, data: Dict[str, Any]):
        """Store estimate session data"""
        self.expire_stale_sessions()
        self.estimate_sessions[session_id] = {
            'data': data,
            'exported_files': [],
            'created_at': datetime.now()
        }

    def _delete_session_files(self, session: Dict[str, Any]) -> Tuple[List[str], List[str]]:
        """Delete files exported for a session, returning deleted paths and errors"""
        files_deleted = []
        errors = []
        for output_path in session['exported_files']:
            if not os.path.isfile(output_path):
                continue
            try:
                os.remove(output_path)
                files_deleted.append(output_path)
                logging.info(f"Deleted output file: {output_path}")
            except OSError as e:
                errors.append(f"Failed to delete {output_path}: {e}")
        return files_deleted, errors

    def expire_stale_sessions(self, now: Optional[datetime] = None) -> int:
        """Drop sessions older than session_ttl together with their exported files"""
        now = now or datetime.now()
        stale = [sid for sid, session in self.estimate_sessions.items()
                 if now - session['created_at'] > self.session_ttl]
        for session_id in stale:
            session = self.estimate_sessions.pop(session_id)
            _, errors = self._delete_session_files(session)
            for error in errors:
                logging.warning(error)
            logging.info(f"Expired session: {session_id}")
        return len(stale)

    def setup_routes(self):
        """Setup Flask routes"""

        @self.app.route('/api/health', methods=['GET'])
        def health_route():
            return jsonify({'success': True, 'status': 'ok'})

        # ========== PRICING ROUTES ==========

        @self.app.route('/api/unit-prices', methods=['POST'])
        def unit_prices_route():
            """Labor and sales unit prices for one or more group cost records"""
            data = _json_body()

            try:
                if 'groupCosts' in data or 'group_costs' in data:
                    group_costs = UnitPricesRequest(**data).group_costs
                else:
                    group_costs = [GroupCost(**data)]
            except ValidationError as e:
                logging.warning(f"Rejected unit price request: {e}")
                return _validation_error(e)

            try:
                unit_prices = [calculate_unit_prices(group_cost) for group_cost in group_costs]
                return UnitPricesResponse(success=True, unit_prices=unit_prices).model_dump(by_alias=True)
            except Exception as e:
                logging.error(f"Error calculating unit prices: {e}", exc_info=True)
                return _error(str(e), 500)

        @self.app.route('/api/estimate', methods=['POST'])
        def estimate_route():
            """Calculate a full estimate and keep it in a session for export"""
            data = _json_body()

            try:
                estimate_request = EstimateRequest(**data)
            except ValidationError as e:
                logging.warning(f"Rejected estimate request: {e}")
                return _validation_error(e)

            try:
                estimate = self.estimate_processor.calculate_estimate(
                    estimate_request.processing_groups,
                    estimate_request.customer_info
                )

                session_id = str(uuid.uuid4())
                self.store_estimate_session(session_id, {'estimate': estimate})

                return EstimateResponse(
                    success=True,
                    session_id=session_id,
                    estimate=estimate
                ).model_dump(by_alias=True)

            except Exception as e:
                logging.error(f"Error calculating estimate: {e}", exc_info=True)
                return _error(str(e), 500)

        @self.app.route('/api/export-estimate', methods=['POST'])
        def export_estimate_route():
            """Export a calculated estimate to Excel"""
            data = _json_body()

            try:
                export_request = ExportEstimateRequest(**data)
            except ValidationError as e:
                return _validation_error(e)

            session = self.estimate_sessions.get(export_request.session_id)
            if session is None:
                return _error('Invalid session', 404)

            try:
                estimate = session['data']['estimate']
                filename = self.estimate_exporter.export(estimate, self.output_folder)
                session['exported_files'].append(os.path.join(self.output_folder, filename))

                return ExportEstimateResponse(
                    success=True,
                    filename=filename,
                    download_url=f'/api/download/{filename}',
                    groups_exported=len(estimate.groups)
                ).model_dump()

            except Exception as e:
                logging.error(f"Error exporting estimate: {e}", exc_info=True)
                return _error(str(e), 500)

        @self.app.route('/api/cleanup-session', methods=['POST'])
        def cleanup_session_route():
            """Cleanup session data and delete its exported files"""
            data = _json_body()

            try:
                cleanup_request = CleanupSessionRequest(**data)
            except ValidationError as e:
                return _validation_error(e)

            session = self.estimate_sessions.pop(cleanup_request.session_id, None)
            if session is None:
                return _error('Invalid session_id', 404)

            files_deleted, errors = self._delete_session_files(session)

            logging.info(f"Cleaned up session: {cleanup_request.session_id}")
            return CleanupSessionResponse(
                success=True,
                session_cleaned=True,
                files_deleted=len(files_deleted),
                deleted_files=files_deleted,
                errors=errors
            ).model_dump()

        # ========== CONFIGURATION ROUTES ==========

        @self.app.route('/api/config/inquiry', methods=['GET'])
        def config_inquiry_route():
            """Get current pricing configuration"""
            try:
                return ConfigInquiryResponse(
                    success=True,
                    config=self.config_manager.get_config()
                ).model_dump()

            except Exception as e:
                logging.error(f"Error getting config: {e}", exc_info=True)
                return ConfigInquiryResponse(
                    success=False,
                    error=str(e)
                ).model_dump(), 500

        @self.app.route('/api/config/update', methods=['POST'])
        def config_update_route():
            """Update pricing configuration"""
            data = _json_body()

            try:
                update_request = ConfigUpdateRequest(**data)
            except ValidationError as e:
                logging.warning(f"Rejected config update: {e}")
                return ConfigUpdateResponse(
                    success=False,
                    message="Configuration update failed",
                    error=str(e)
                ).model_dump(), 400

            if self.config_manager.update_config(update_request):
                self._reload_processors()

                return ConfigUpdateResponse(
                    success=True,
                    message="Configuration updated successfully",
                    updated_fields=list(update_request.model_dump(exclude_none=True).keys())
                ).model_dump()

            return ConfigUpdateResponse(
                success=False,
                message="Failed to update configuration",
                error="Update operation failed"
            ).model_dump(), 500

        @self.app.route('/api/config/reset', methods=['POST'])
        def config_reset_route():
            """Restore default pricing configuration"""
            if self.config_manager.reset_to_defaults():
                self._reload_processors()
                return ConfigUpdateResponse(
                    success=True,
                    message="Configuration reset to defaults"
                ).model_dump()

            return ConfigUpdateResponse(
                success=False,
                message="Failed to reset configuration",
                error="Reset operation failed"
            ).model_dump(), 500

        @self.app.route('/api/download/<filename>')
        def download_file(filename):
            """Download an exported estimate"""
            filepath = os.path.join(self.output_folder, secure_filename(filename))
            if os.path.exists(filepath):
                return send_file(filepath, as_attachment=True)
            return jsonify({'success': False, 'error': 'File not found'}), 404

    def run(self, host: str = 'localhost', port: int = 5000, debug: bool = True):
        """Run the Flask application"""
        logging.info(f"Estimator pricing server starting on http://{host}:{port}")
        self.app.run(host=host, port=port, debug=debug)

if __name__ == '__main__':
    server = App()
    server.run()
