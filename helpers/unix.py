import logging
import subprocess

logger = logging.getLogger(__name__)

# Return code used when the command itself cannot be started or times out,
# mirroring the shell's "command not found".
RC_NOT_RUN = 127


def run_cmd(cmd: list[str], timeout_s: int | None = 10) -> tuple[int, str, str]:
    """
    Run a command and return:
      - return code (rc)
      - stdout (string)
      - stderr (string)

    A missing binary, a permission error or a timeout never raises: it comes
    back as rc=127 with the reason in stderr, so callers can treat it as an
    absent fact.
    """
    try:
        p = subprocess.run(
            cmd,
            text=True,              # decode output to str instead of bytes
            capture_output=True,    # capture stdout/stderr
            timeout=timeout_s
        )
    except (FileNotFoundError, PermissionError) as e:
        return RC_NOT_RUN, "", f"{type(e).__name__}: {e}"
    except subprocess.TimeoutExpired:
        logger.warning("command timed out after %ss: %s", timeout_s, " ".join(cmd))
        return RC_NOT_RUN, "", f"timed out after {timeout_s}s"

    # Normalise None → "" and strip whitespace
    return p.returncode, (p.stdout or "").strip(), (p.stderr or "").strip()


def get_evidence(cmd, rc, stdout, stderr):

    return {
        "cmd": cmd,
        "rc": rc,
        "stdout": stdout,
        "stderr": stderr
    }
