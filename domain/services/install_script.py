from domain.value_objects.mirror_source import MirrorSource

INSTALL_SCRIPT_FILENAME = "install.sh"

_TEMPLATE = """#!/bin/bash
sudo pacman -S --noconfirm --needed git
git clone {clone_url} -b {branch}
cd {repo}
chmod +x ./install.sh
./install.sh
cd ..
rm -rf {repo}
"""


def render_install_script(source: MirrorSource) -> str:
    """Render the bootstrap script that clones the mirrored repository and runs its installer."""
    return _TEMPLATE.format(clone_url=source.clone_url, branch=source.branch, repo=source.repo)
