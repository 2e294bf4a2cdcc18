# repository/default_knowledge_bases.py
# Built-in knowledge bases, served when no relational store is configured.
from typing import Dict, Final
from model.knowledge_base import KnowledgeBaseConfig

_GOLDEN_RULES_CONTENT = """SAFETY GOLDEN RULES BERAU COAL

KELAYAKAN KENDARAAN DAN UNIT:
Pekerja dilarang mengoperasikan kendaraan atau unit yang diketahui fungsi rem, kemudi, atau sabuk pengaman rusak. Pekerja dilarang mengoperasikan kendaraan di area tambang tanpa buggy-whip, radio komunikasi dan lampu strobo. Dilarang merubah/menghilangkan fungsi alat keselamatan pada kendaraan dan unit yang sudah diuji kelayakan.

PENGOPERASIAN KENDARAAN DAN UNIT:
Dilarang mengoperasikan kendaraan atau unit di luar batas kecepatan yang ditentukan. Dilarang mengemudi dalam kondisi pengaruh alkohol dan/atau obat terlarang. Dilarang menggunakan HP ketika mengemudi kecuali menggunakan alat bantu. Dilarang mengangkut pekerja di atas/luar kabin kendaraan. Wajib menggunakan sabuk pengaman ketika mengemudi.

LOCK OUT & TAG OUT (LOTO):
Harus memasang personal LOTO dengan benar pada saat melakukan perbaikan atau perawatan yang membutuhkan label & penandaan. Dilarang menjadikan alat mekanis sebagai LOTO.

KESELAMATAN BEKERJA DI KETINGGIAN:
Dilarang memanjat pada peralatan bergerak jika tidak dilengkapi fasilitas permanen untuk bekerja di ketinggian. Dilarang bekerja pada ketinggian lebih dari 1,8 meter tanpa menggunakan alat pelindung jatuh (full body harness).

KESELAMATAN BEKERJA DI RUANG TERBATAS:
Dilarang memasuki ruang terbatas tanpa izin kerja (permit) yang sah. Wajib memastikan proses isolasi energi, ventilasi yang memadai, pengukuran gas, pengawasan petugas siaga, serta prosedur penyelamatan darurat telah tersedia dan aktif.

KESELAMATAN ALAT ANGKAT DAN ALAT PENYANGGA:
Pekerja dilarang mengoperasikan alat angkat tanpa memiliki SIMPER atau KIMPER. Dilarang berdiri di bawah beban yang sedang diangkat.

BEKERJA DI DEKAT TEBING ATAU DINDING GALIAN:
Dilarang bekerja di bawah lereng/dinding galian yang mudah longsor, kecuali telah diperkuat atau ada penyangga.

BEKERJA PADA AREA PELEDAKAN:
Dilarang mendekat area peledakan (blasting area) tanpa izin. Dilarang membawa perangkat komunikasi/elektronik tertentu yang dapat memicu peledakan di area terlarang.

BEKERJA DI DEKAT AIR:
Dilarang bekerja di atas ponton/jembatan kerja/talang air tanpa dilengkapi pagar pembatas dan pelampung keselamatan. Wajib menggunakan life jacket saat bekerja di atas air atau di dekat air.

BEKERJA DI AREA DISPOSAL:
Dilarang melakukan pembuangan material di area disposal yang tidak stabil atau tidak ditentukan. Dilarang parkir di area disposal yang aktif tanpa pengamanan.

BEKERJA PADA AREA PEMBERSIHAN LAHAN:
Dilarang mendekat ke area penebangan/penarikan pohon tanpa pengamanan. Wajib memastikan jalur evakuasi jelas dan aman."""

_GOLDEN_RULES_PROMPT = """Berdasarkan konteks Safety Golden Rules berikut:
{RETRIEVED_CONTEXT}

Analisis deskripsi hazard ini: "{USER_INPUT}"

Tentukan kategori hazard yang paling sesuai dari pilihan berikut:
1. Kelayakan Kendaraan & Unit
2. Pengoperasian Kendaraan & Unit
3. Lock Out & Tag Out
4. Keselamatan Bekerja Di Ketinggian
5. Keselamatan Bekerja Di Ruang Terbatas
6. Keselamatan Alat Angkat & Angkut
7. Bekerja Di Dekat Tebing Atau Dinding Galian
8. Bekerja Pada Area Peledakan
9. Bekerja Di Dekat Air
10. Bekerja Di Disposal
11. Bekerja Pada Area Pembersihan Lahan
12. Tidak Melanggar Golden Rules

Berikan jawaban dalam format:
KATEGORI: [pilih salah satu dari 12 kategori di atas]
CONFIDENCE: [0-100%]
ALASAN: [penjelasan singkat mengapa masuk kategori tersebut]"""

_PSPP_CONTENT = """PERATURAN SANKSI PELANGGARAN PROSEDUR (PSPP):

1. Tidak membawa/menunjukkan SIMPER yang masih berlaku saat mengoperasikan unit atau kendaraan perusahaan di area operasi PT Berau Coal.

2. Tidak mengoperasikan Strobe Light/Flash Lamp/Blitz Lamp/Rotary Lamp pada saat mengoperasikan unit/kendaraan di area tambang dan jalan hauling.

3. Tidak menyalakan lampu besar saat mengoperasikan unit/kendaraan di area tambang dan jalan hauling.

4. Pengemudi menghentikan unit/kendaraan di daerah terlarang atau berbahaya, diantaranya pada tanjakan, jembatan, tikungan, turunan, tengah jalan, kecuali dalam keadaan darurat.

5. Saat mengalami kerusakan di jalan tambang dan jalan hauling, kendaraan/unit tidak memasang Traffic Cone/segitiga keselamatan dan ganjal ban.

10. Melanggar kecepatan maksimum di semua jalan tambang dan jalan hauling melebihi kecepatan maksimum > 5 km/jam.

13. Tidak melakukan P2H (prosedur pemeriksaan harian) sebelum mengoperasikan Unit/Kendaraan.

18. Tidak menggunakan sepatu keselamatan/safety shoes saat sedang mengoperasikan kendaraan/unit operasional.

22. Mengoperasikan kendaraan ringan (Light Vehicle) di jalan tambang maupun hauling tanpa menggunakan Buggy Whip.

27. Operator/Driver/Pengemudi/Penumpang merokok di dalam kabin kendaraan/unit operasional perusahaan baik di dalam maupun di luar area operasional.

31. Tidak berhenti pada rambu STOP saat mengoperasikan kendaraan/unit di area Operasional Tambang.

39. Mengoperasikan kendaraan/unit operasional dibawah pengaruh alkohol atau obat terlarang/mabuk."""

_PSPP_PROMPT = """Berdasarkan konteks PSPP berikut:
{RETRIEVED_CONTEXT}

Analisis pelanggaran ini: "{USER_INPUT}"

Tentukan nomor PSPP yang paling sesuai dari 39 item PSPP (1-39).

Format jawaban:
KATEGORI PSPP: [nomor 1-39]
CONFIDENCE: [0-100%]
ALASAN: [penjelasan singkat mengapa masuk kategori PSPP tersebut]"""

_TBC_CONTENT = """TO BE CONCERN (TBC) HAZARD:

1. Deviasi pengoperasian kendaraan/unit: Fatigue (yawning, microsleep, closed eyes), melakukan aktivitas lain (headset, handphone, makan, minum, merokok), pengoperasian unit yang tidak layak operasi, tidak menjaga jarak beriringan unit saat beroperasi, overspeed, melintas pada jalur berlawanan.

2. Deviasi penggunaan APD: Tidak menggunakan APD yang sesuai/dengan benar/layak, ditemukan kondisi APD yang tidak layak, tidak memasang welding screen saat aktivitas welding.

3. Geotech & Hydrology: Penempatan prasarana pada radius area rawan longsor, retakan, aktivitas penambangan tidak sesuai rekomendasi kajian geoteknik, tidak dilakukan pemantauan kestabilan lereng dan timbunan.

5. Deviasi Loading/Dumping: Jarak dumping <20m (rawa), <10m (air), 4-5m (kering), dumping menyentuh/menaiki tanggul, undercut, tidak ada tanggul pengaman pada top loading.

7. LOTO (Lock Out Tag Out): Tag LOTO pudar/rusak/tidak tersedia, kunci LOTO digantung tanpa dilepas pada gembok, tidak mengisi formulir LOTO.

11. Bahaya Elektrikal: Potensi percikan api, tidak ada pengecekan instalasi listrik, tidak ada barikade/penandaan area tegangan tinggi, perbaikan instalasi tanpa memutus aliran listrik.

12. Bahaya Biologis: Tidak ada identifikasi bahaya biologis, tanaman merambat lebat berpotensi jadi sarang ular, tidak tersedia serum anti bisa ular (SABU) di fasilitas kesehatan.

14. Technology: Terdapat area/aktivitas kritis tidak tercover CCTV/Mining Eyes, P2H control room DMS/Mining Eyes tidak dilakukan."""

_TBC_PROMPT = """Berdasarkan konteks TBC Hazard berikut:
{RETRIEVED_CONTEXT}

Analisis hazard concern ini: "{USER_INPUT}"

Tentukan kategori TBC yang paling sesuai dari 14 kategori:
1. Deviasi pengoperasian kendaraan/unit
2. Deviasi penggunaan APD
3. Geotech & Hydrology
4. Posisi Pekerja pada Area Tidak Aman/Pekerjaan Tidak Sesuai Prosedur
5. Deviasi Loading/Dumping
6. Tidak terdapat pengawas/pengawas tidak memadai
7. LOTO (Lock Out Tag Out)
8. Deviasi Road Management
9. Kesesuaian Dokumen Kerja
10. Tools Tidak Standard/Penggunaan Tools Tidak Tepat
11. Bahaya Elektrikal
12. Bahaya Biologis
13. Aktivitas Drill and Blast
14. Technology

Format jawaban:
KATEGORI TBC: [pilih salah satu dari 14 kategori di atas]
CONFIDENCE: [0-100%]
ALASAN: [penjelasan singkat mengapa masuk kategori TBC tersebut]"""

DEFAULT_KNOWLEDGE_BASES: Final[Dict[str, KnowledgeBaseConfig]] = {
    "golden_rules": KnowledgeBaseConfig(
        id="golden_rules",
        name="Safety Golden Rules",
        color="info",
        description="Core safety regulations and procedures",
        content=_GOLDEN_RULES_CONTENT,
        promptTemplate=_GOLDEN_RULES_PROMPT,
    ),
    "pspp": KnowledgeBaseConfig(
        id="pspp",
        name="PSPP - Peraturan Sanksi Pelanggaran Prosedur",
        color="warning",
        description="Violation procedures and sanctions",
        content=_PSPP_CONTENT,
        promptTemplate=_PSPP_PROMPT,
    ),
    "tbc": KnowledgeBaseConfig(
        id="tbc",
        name="TBC - To be Concern Hazard",
        color="success",
        description="Critical concern areas and hazards",
        content=_TBC_CONTENT,
        promptTemplate=_TBC_PROMPT,
    ),
}
