"""
Assets that are always curated, whether or not any scanned source references them.

Keep this list in sync with the asset tree when projects are added or retired.
"""

CORE_ASSETS = (
    "/assets/chaos-manifest.json",

    # vibetales videos
    "/assets/vibetales/video/Der Kanzler Simulator 👾.mp4",
    "/assets/vibetales/video/mixkit-abstract-video-of-a-liquid-with-dark-ink-flowing-44818-hd-ready.mp4",
    "/assets/vibetales/video/mixkit-colorful-dance-of-a-young-dancer-51277-hd-ready.mp4",
    "/assets/vibetales/video/GehWeidaRoboter2.mp4",
    "/assets/vibetales/video/BrentWilly_16_9.mp4",

    # vibetales character voices and effects
    "/assets/vibetales/audio/marco_states.webm",
    "/assets/vibetales/audio/blobby_states.webm",
    "/assets/vibetales/audio/beat1.mp3",
    "/assets/vibetales/audio/jingle1.mp3",
    "/assets/vibetales/audio/electro.mp3",

    # neo-neukoelln
    "/assets/neo-neukoelln/images/doener_kebap.webp",
    "/assets/neo-neukoelln/images/mutumbo.png",
    "/assets/neo-neukoelln/images/techno_girl.png",
    "/assets/neo-neukoelln/images/aggressive_pigeon.png",
    "/assets/neo-neukoelln/images/brandenburg_gate.webp",
    "/assets/neo-neukoelln/audio/techno.mp3",
    "/assets/neo-neukoelln/audio/gametheme.mp3",

    # miami-voice
    "/assets/miami-voice/images/tico.png",
    "/assets/miami-voice/images/skyline.png",
    "/assets/miami-voice/images/sun.svg",
    "/assets/miami-voice/audio/miami.mp3",
    "/assets/miami-voice/audio/disco.mp3",
    "/assets/miami-voice/audio/weee.mp3",

    # rosebud
    "/assets/rosebud/audio/Die Willy Theme.mp3",
    "/assets/rosebud/audio/blips.mp3",
    "/assets/rosebud/audio/computer.mp3",

    # royal-rumble
    "/assets/royal-rumble/audio/punch.mp3",
    "/assets/royal-rumble/audio/kick.mp3",

    # logos and branding
    "/assets/vibegame-site/images/simwilly.jpg",
    "/assets/blobtv/images/blobtv_logo.png",
    "/assets/ikigaii/images/logo.png",
    "/assets/derpaket/images/DerPaket_logo.png",
    "/assets/derpaket/images/snicklink-logo.png",

    "/assets/blobtv/video/blobgpt-animation.mp4",
)
