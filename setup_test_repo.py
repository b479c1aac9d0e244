import subprocess
from pathlib import Path

def run(cmd, cwd=None):
    print(f"[{cwd or '.'}]$ {cmd}")
    subprocess.check_call(cmd, shell=True, cwd=cwd)

def git_init(path, name):
    path.mkdir(parents=True, exist_ok=True)
    run("git init", cwd=path)
    run("git symbolic-ref HEAD refs/heads/main", cwd=path)
    (path / "README.md").write_text(f"# {name}\n")
    run("git add README.md", cwd=path)
    run(f'git commit -m "Initial commit in {name}"', cwd=path)
    return path

def publish(path, remotes_dir, name):
    """Create a bare remote for the repo at `path` and push main to it."""
    bare = remotes_dir / f"{name}.git"
    run(f"git init --bare {bare}")
    run("git symbolic-ref HEAD refs/heads/main", cwd=bare)
    run(f"git remote add origin {bare}", cwd=path)
    run("git push -u origin main", cwd=path)
    return bare

def write_gitmodules(path, entries):
    lines = []
    for name, options in entries.items():
        lines.append(f'[submodule "{name}"]')
        lines.extend(f"\t{key} = {value}" for key, value in options.items())
    (path / ".gitmodules").write_text("\n".join(lines) + "\n")

# --- Setup base paths ---
base = Path("submodule-sync-playground").absolute()
if base.exists():
    run("rm -rf submodule-sync-playground", cwd=base.parent)

base.mkdir()
seeds = base / "seeds"
remotes = base / "remotes"
remotes.mkdir()

# --- Upstream libraries ---
libfoo_remote = publish(git_init(seeds / "libfoo", "libfoo"), remotes, "libfoo")
libbar_remote = publish(git_init(seeds / "libbar", "libbar"), remotes, "libbar")
legacy_remote = publish(git_init(seeds / "legacy", "legacy"), remotes, "legacy")

# --- Parent repository declaring all three, none of them cloned yet ---
parent = base / "parent"
git_init(parent, "parent")
write_gitmodules(parent, {
    "libfoo": {"path": "vendor/libfoo", "url": libfoo_remote, "branch": "main", "ignore": "none"},
    "libbar": {"path": "vendor/libbar", "url": libbar_remote, "branch": "main", "ignore": "dirty"},
    "legacy": {"path": "vendor/legacy", "url": legacy_remote, "branch": "main", "ignore": "all"},
})
run("git add .gitmodules", cwd=parent)
run('git commit -m "Declare submodules"', cwd=parent)
publish(parent, remotes, "parent")

print(f"\nPlayground created at {base}")
print("Repo structure:\n - parent\n   - vendor/libfoo (ignore=none)\n   - vendor/libbar (ignore=dirty)\n   - vendor/legacy (ignore=all)")
print("\nLocal clones need file transport enabled:")
print("  git config --global protocol.file.allow always")
print(f"\nThen run:\n  submodule-sync --repo-path {parent} sync --dry-run\n  submodule-sync --repo-path {parent} sync")
