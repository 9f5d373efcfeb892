"""Main entry point for LoreChat Engine."""

import logging
import sys
import io
from datetime import datetime
from pathlib import Path

import uvicorn


def setup_logging(debug: bool = False, log_dir: Path = Path("data/debug_logs/server")):
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    
    # Force UTF-8 encoding for stdout/stderr on Windows
    if sys.platform == 'win32':
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace')
        sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', errors='replace')
    
    handlers = [logging.StreamHandler(sys.stdout)]
    
    log_file = None
    
    # Add file handler if debug mode is enabled
    if debug:
        log_dir.mkdir(parents=True, exist_ok=True)
        
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"server_{timestamp}.log"
        
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        handlers.append(file_handler)
    
    # Root logger stays at INFO to keep library logs quiet
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )
    
    app_logger = logging.getLogger('lorechat_engine')
    app_logger.setLevel(level)
    
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('multipart').setLevel(logging.WARNING)
    
    startup_logger = logging.getLogger(__name__)
    if log_file:
        startup_logger.info(f"[STARTUP] Server log file: {log_file}")
    startup_logger.info(f"[STARTUP] Logging configured: level={logging.getLevelName(level)}")
    
    return log_file


def main():
    """Run the FastAPI server."""
    from lorechat_engine.config import ConfigLoader, SystemConfig
    try:
        system_config = ConfigLoader().load_system_config()
    except Exception as e:
        # Logger isn't configured yet
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        logging.getLogger(__name__).warning(f"[STARTUP WARNING] Could not load system config: {e}, using defaults")
        system_config = SystemConfig()
    
    setup_logging(debug=system_config.debug, log_dir=system_config.paths.data / "debug_logs" / "server")
    
    logger = logging.getLogger(__name__)
    logger.info(f"Starting LoreChat Engine server (debug mode: {system_config.debug})...")
    logger.info(f"Server will listen on {system_config.api_host}:{system_config.api_port}")
    
    uvicorn.run(
        "lorechat_engine.api.app:app",
        host=system_config.api_host,
        port=system_config.api_port,
        reload=False,
        log_level="info",
        log_config=None,  # keep our basicConfig
    )


if __name__ == "__main__":
    main()
